"""Serve the backend-for-frontend with uvicorn: ``python -m webui_bff``."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "webui_bff.api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "4321")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
