"""Filling of raw JSON response bodies."""

import json
import logging
from typing import TYPE_CHECKING, Optional

from fieldfill.core.exceptions import FieldFillError
from fieldfill.models.options import FillOptions

if TYPE_CHECKING:
    from fieldfill.services.filler import FieldFiller

logger = logging.getLogger(__name__)


async def fill_json_body(
    filler: "FieldFiller",
    body: bytes,
    options: Optional[FillOptions] = None,
) -> Optional[bytes]:
    """Fill a JSON document held in ``body``.

    Returns:
        The re-encoded filled document, or None when the body is not a JSON
        object or array, or filling failed. Callers then send the original.
    """
    try:
        payload = json.loads(body)
    except ValueError:
        return None

    if not isinstance(payload, (dict, list)):
        return None

    try:
        filled = await filler.fill(payload, options)
    except FieldFillError as e:
        logger.warning(f"Failed to fill response body: {e.message}")
        return None

    return json.dumps(filled).encode("utf-8")
