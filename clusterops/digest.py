"""Parameter filtering for operation digests.

The scheduler hashes a resource's parameters to tell a real configuration
change from bookkeeping churn. Before hashing, the attributes every node adds
for its own purposes are dropped, together with all ``CRM_meta_*``
meta-attributes. Recurring operations keep their timeout, which is part of
what makes one monitor differ from another.

The attribute names below are shared cluster-wide; a mismatch with peers
silently breaks digest comparison.
"""

import hashlib
import logging
from typing import Mapping
from xml.sax.saxutils import quoteattr

logger = logging.getLogger(__name__)

XML_ATTR_ID = 'id'
XML_ATTR_CRM_VERSION = 'crm_feature_set'
XML_LRM_ATTR_OP_DIGEST = 'op-digest'
XML_LRM_ATTR_TARGET = 'on_node'
XML_LRM_ATTR_TARGET_UUID = 'on_node_uuid'
PCMK_EXTERNAL_IP = 'pcmk_external_ip'
XML_LRM_ATTR_INTERVAL_MS = 'interval'
XML_ATTR_TIMEOUT = 'timeout'

CRM_META = 'CRM_meta'

DIGEST_EXCLUDED_ATTRS = (
    XML_ATTR_ID,
    XML_ATTR_CRM_VERSION,
    XML_LRM_ATTR_OP_DIGEST,
    XML_LRM_ATTR_TARGET,
    XML_LRM_ATTR_TARGET_UUID,
    PCMK_EXTERNAL_IP,
)

_MAX_INTERVAL_MS = 2 ** 32 - 1


def meta_name(field: str) -> str:
    """Name of the meta-attribute carrying *field*, e.g. ``CRM_meta_timeout``."""
    return f"{CRM_META}_{field.replace('-', '_')}"


def _is_meta(name: str) -> bool:
    # Case-insensitive, unlike every other attribute name comparison. Peers
    # filter the same way, so it must stay.
    return name[:len(CRM_META)].lower() == CRM_META.lower()


def _interval_ms(value: str | None) -> int:
    if value is None:
        return 0
    text = value.strip()
    if not text.isascii() or not text.isdigit():
        logger.debug("Ignoring unparseable interval '%s'", value)
        return 0
    interval = int(text)
    if interval > _MAX_INTERVAL_MS:
        logger.debug("Ignoring out of range interval '%s'", value)
        return 0
    return interval


def filter_op_for_digest(params: Mapping[str, str] | None) -> dict[str, str] | None:
    """Return a copy of *params* without the attributes digests must ignore.

    Steps:
      1. drop the bookkeeping attributes in DIGEST_EXCLUDED_ATTRS;
      2. read the interval from ``CRM_meta_interval`` (0 if absent or bad);
      3. remember ``CRM_meta_timeout``;
      4. drop every attribute starting with ``CRM_meta``, in any case;
      5. put the timeout back if the operation is recurring.

    A set already filtered for a recurring operation has lost its interval but
    still carries the timeout as its only meta-attribute; that timeout is kept
    so filtering twice gives the same set as filtering once. A raw set of that
    exact shape is indistinguishable and keeps its timeout too, where peers
    would drop it.
    """
    if params is None:
        return None

    filtered = {k: v for k, v in params.items() if k not in DIGEST_EXCLUDED_ATTRS}

    interval_key = meta_name(XML_LRM_ATTR_INTERVAL_MS)
    timeout_key = meta_name(XML_ATTR_TIMEOUT)
    interval_ms = _interval_ms(filtered.get(interval_key))
    timeout = filtered.get(timeout_key)

    meta_keys = [k for k in filtered if _is_meta(k)]
    if interval_key not in filtered and meta_keys == [timeout_key]:
        return filtered

    for key in meta_keys:
        del filtered[key]

    if interval_ms != 0 and timeout is not None:
        filtered[timeout_key] = timeout
    return filtered


def calculate_digest(params: Mapping[str, str]) -> str:
    """MD5 hex digest of *params* rendered as a canonical parameters element.

    Attributes are sorted by name so insertion order never changes the digest.
    """
    rendered = ''.join(f' {name}={quoteattr(str(params[name]))}' for name in sorted(params))
    return hashlib.md5(f'<parameters{rendered}/>'.encode('utf-8')).hexdigest()


def op_digest(params: Mapping[str, str]) -> str:
    return calculate_digest(filter_op_for_digest(params))
