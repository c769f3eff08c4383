"""Run the API server: ``python -m task_manager``."""

import uvicorn

from task_manager.core.config import settings


def main() -> None:
    uvicorn.run(
        "task_manager.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
