"""Run the server: python -m student_mcp"""

import uvicorn

from student_mcp.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "student_mcp.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
    )


if __name__ == "__main__":
    main()
