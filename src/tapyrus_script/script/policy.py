"""Relay policy — which classified output scripts are standard.

The policy values are owned by the caller and passed in; classification
itself never consults them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tapyrus_script.script.standard import TxOutType, solver

if TYPE_CHECKING:
    from tapyrus_script.config.settings import PolicyConfig

logger = logging.getLogger(__name__)

# Largest bare multisig considered standard.
MAX_STANDARD_MULTISIG_KEYS = 3


def is_standard(script: bytes, policy: PolicyConfig) -> tuple[bool, TxOutType]:
    """Check whether an output script is standard for relay.

    Args:
        script: The locking script.
        policy: Data-carrier settings to apply to null-data outputs.

    Returns:
        Tuple of (standard, output type).
    """
    result = solver(script)
    if not result.success:
        return False, result.type

    if result.type == TxOutType.MULTISIG:
        m = result.solutions[0][0]
        n = result.solutions[-1][0]
        if not 1 <= n <= MAX_STANDARD_MULTISIG_KEYS or not 1 <= m <= n:
            return False, result.type
    elif result.type == TxOutType.NULL_DATA:
        if not policy.accept_datacarrier:
            return False, result.type
        if len(script) > policy.max_datacarrier_bytes:
            logger.debug(
                "Null-data output of %d bytes exceeds %d",
                len(script),
                policy.max_datacarrier_bytes,
            )
            return False, result.type

    standard = result.type not in (TxOutType.NONSTANDARD, TxOutType.WITNESS_UNKNOWN)
    return standard, result.type
