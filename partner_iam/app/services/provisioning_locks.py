from typing import Set


class ProvisioningLockRegistry:
    """
    In-flight provisioning per target email.

    try_acquire does not await between check and insert, so on one event loop
    two sagas for the same email can never both hold the lock.
    """

    def __init__(self):
        self._in_flight: Set[str] = set()

    @staticmethod
    def key_for(email: str) -> str:
        return email.strip().lower()

    def try_acquire(self, email: str) -> bool:
        key = self.key_for(email)
        if key in self._in_flight:
            return False
        self._in_flight.add(key)
        return True

    def release(self, email: str) -> None:
        self._in_flight.discard(self.key_for(email))

    def is_held(self, email: str) -> bool:
        return self.key_for(email) in self._in_flight
