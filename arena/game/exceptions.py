"""Custom exceptions for game-related errors."""

from typing import Optional


class InvariantViolationError(AssertionError):
    """Exception raised when battle data breaks a structural invariant.

    Examples are HP outside [0, max_hp], duplicate instance ids or a fainted
    creature on the bench. These point at corrupted or hand-built state
    upstream of the engine and are not recovered from.

    Attributes:
        detail: Description of the violated invariant
        instance_id: The creature instance involved, if any
    """

    def __init__(self, detail: str, instance_id: Optional[str] = None):
        """Initialize the InvariantViolationError.

        Args:
            detail: Description of the violated invariant
            instance_id: The creature instance involved, if any
        """
        self.detail = detail
        self.instance_id = instance_id
        if instance_id is None:
            super().__init__(detail)
        else:
            super().__init__(f"{instance_id}: {detail}")


class ReplayMismatchError(Exception):
    """Exception raised when a replayed battle ends in a different state.

    Attributes:
        battle_id: The battle that was replayed
        expected_digest: Digest stored with the battle record
        actual_digest: Digest of the replayed final state
    """

    def __init__(self, battle_id: str, expected_digest: str, actual_digest: str):
        self.battle_id = battle_id
        self.expected_digest = expected_digest
        self.actual_digest = actual_digest
        super().__init__(
            f"Replay of {battle_id} diverged: expected {expected_digest}, "
            f"got {actual_digest}"
        )
