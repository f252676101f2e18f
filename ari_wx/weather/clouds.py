"""Cloud layer parsing and ceiling derivation."""

import re
from typing import Iterable, List, Optional, Union

from ari_wx.weather.fields import tokenize
from ari_wx.weather.models import CloudLayer

_CLOUD_RE = re.compile(r'^(FEW|SCT|BKN|OVC|VV)(\d{3})(CB|TCU)?$')

CloudInput = Union[str, Iterable[Union[str, CloudLayer]]]


def parse_cloud_layer(token: str) -> Optional[CloudLayer]:
    """
    Parse a cloud group such as ``BKN025`` or ``OVC008CB``.

    The height must be exactly three digits; ``BKN///`` or ``SCT0250`` are
    not cloud layers.
    """
    if not token:
        return None
    match = _CLOUD_RE.match(token.upper())
    if not match:
        return None
    kind, height, cloud_type = match.groups()
    return CloudLayer(
        kind=kind,
        height_hundreds_ft=int(height),
        cloud_type=cloud_type,
        raw=token.upper(),
    )


def cloud_layers(source: CloudInput) -> List[CloudLayer]:
    """
    All cloud layers in a report, in source order.

    Args:
        source: Condition text, a token list, or already parsed layers
    """
    if isinstance(source, str):
        source = tokenize(source)

    layers = []
    for item in source:
        layer = item if isinstance(item, CloudLayer) else parse_cloud_layer(item)
        if layer is not None:
            layers.append(layer)
    return layers


def ceiling_of(source: CloudInput) -> Optional[int]:
    """
    Ceiling in feet: the lowest BKN, OVC or VV layer.

    FEW and SCT never form a ceiling. Returns None when no layer qualifies,
    which is the "no ceiling" case and not an error.
    """
    heights = [layer.height_ft for layer in cloud_layers(source) if layer.is_ceiling]
    if not heights:
        return None
    return min(heights)
