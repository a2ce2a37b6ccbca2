"""Prometheus text exposition decoder.

Only the two checkpoint families are consulted; everything else in the
payload is parsed (so syntax errors anywhere are reported) and dropped.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from prometheus_client.parser import text_string_to_metric_families

from ..errors import ParseError
from .models import TRACKED_FAMILIES, Sample

logger = logging.getLogger(__name__)


def _check_type_lines(text: str) -> None:
    seen = set()
    for line in text.splitlines():
        parts = line.split()
        if len(parts) >= 3 and parts[0] == "#" and parts[1] == "TYPE":
            if parts[2] in seen:
                raise ParseError(
                    f"reading text format failed: second TYPE line for metric name {parts[2]!r}"
                )
            seen.add(parts[2])


def parse_families(text: str) -> Dict[str, object]:
    """Parse the whole payload into ``{family_name: Metric}``.

    A family declared twice, or whose samples are split across the payload,
    is rejected.
    """
    _check_type_lines(text)
    families: Dict[str, object] = {}
    try:
        for family in text_string_to_metric_families(text):
            if family.name in families:
                raise ParseError(
                    f"reading text format failed: metric family {family.name!r} appears more than once"
                )
            families[family.name] = family
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"reading text format failed: {e}", cause=e) from e
    return families


def decode_samples(text: str) -> List[Sample]:
    """Decode the tracked gauges, known first then synced.

    Absent families (or families without samples) are skipped, so a payload
    may yield 0, 1 or 2 samples. Values are passed through unchanged.
    """
    families = parse_families(text)
    samples: List[Sample] = []
    for name in TRACKED_FAMILIES:
        family = families.get(name)
        if family is None or not family.samples:
            logger.debug("[DECODE] family=%s missing from payload", name)
            continue
        samples.append(Sample(name=name, value=float(family.samples[0].value)))
    return samples
