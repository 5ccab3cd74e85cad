import uvicorn

from cors_gateway.config import load_config
from cors_gateway.server import configure_tracing, create_app


def main() -> None:
    config = load_config()
    configure_tracing(config)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level,
    )


if __name__ == "__main__":
    main()
