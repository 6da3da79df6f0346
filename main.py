import asyncio
from core.initialization import initialize_components, load_configuration


async def run_service() -> None:
    """
    Entrypoint coroutine.

    Loads the configuration, builds one trading client per venue that has
    credentials and serves the webhook delivery endpoint until cancelled.
    """
    config = load_configuration()
    components = initialize_components(config)

    try:
        await components["webhook"].serve()
    finally:
        components["session"].close()


def main():
    try:
        asyncio.run(run_service())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
