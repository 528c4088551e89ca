from __future__ import annotations

import asyncio
import logging

from place_autocomplete.config import YamlConfigLoader
from place_autocomplete.config.models import ConfigLoadRequest
from place_autocomplete.core.models import LocationData, Suggestion
from place_autocomplete.logging import init_logging
from place_autocomplete.provider import StaticSuggestionProvider
from place_autocomplete.scheduler import RequestScheduler, SelectionAcceptanceHandler

PLACES = (
    Suggestion(id="relation-5400890", display_text="Lisbon, Portugal", coordinates=(-9.1365919, 38.7077507), metadata="city"),
    Suggestion(id="relation-71525", display_text="Paris, France", coordinates=(2.3483915, 48.8534951), metadata="city"),
)


async def main() -> None:
    config = await YamlConfigLoader().load(ConfigLoadRequest(yaml_path="examples/config.yaml", dotenv_path=None))
    init_logging(config.logging)

    logger = logging.getLogger("smoke")
    logger.info("Config loaded initial_delay_seconds=%s", config.autocomplete.initial_delay_seconds)

    def sink(location: LocationData) -> None:
        logger.info("Location settled display_name=%s coordinates=%s", location.display_name, location.coordinates)

    scheduler = RequestScheduler(provider=StaticSuggestionProvider(places=PLACES), settings=config.autocomplete)
    handler = SelectionAcceptanceHandler(scheduler=scheduler, sink=sink)

    scheduler.on_text_changed("Lis")
    await asyncio.sleep(config.autocomplete.initial_delay_seconds + 0.1)
    handler.accept(PLACES[0])
    scheduler.close()


if __name__ == "__main__":
    asyncio.run(main())
