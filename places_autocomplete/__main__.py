"""Type each query into a field backed by the live Places API and print what comes back."""
import asyncio
import json
import logging
import sys

from places_autocomplete.config import AutocompleteConfig
from places_autocomplete.errors import PlacesError
from places_autocomplete.field import PlacesAutocompleteField

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def log_resolved(prediction):
    if prediction.has_coordinates:
        logger.info(f"Resolved: {json.dumps(prediction.to_dict())}")


async def run(queries):
    config = AutocompleteConfig.from_env()
    field = PlacesAutocompleteField(
        config,
        on_item_click=lambda p: logger.info(f"Selected: {p.description}"),
        on_place_details=log_resolved,
        on_error=lambda e: logger.error(f"Search failed: {e}"),
    )
    try:
        for query in queries:
            # one submit per keystroke, the way a text field reports changes
            for i in range(1, len(query) + 1):
                field.on_text_changed(query[:i])
                await asyncio.sleep(0.05)
            await field.controller.wait_idle()

            logger.info(f"Found {len(field.predictions)} predictions for {query!r}")
            for i, prediction in enumerate(field.predictions, 1):
                logger.info(f"Prediction {i}: {prediction.description} ({prediction.place_id})")

            if field.predictions:
                await field.select_index(0)
            field.on_text_changed("")
    finally:
        field.dispose()


def main(argv=None):
    queries = sys.argv[1:] if argv is None else argv
    if not queries:
        print("usage: python -m places_autocomplete QUERY [QUERY ...]", file=sys.stderr)
        return 2
    try:
        asyncio.run(run(queries))
    except PlacesError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
