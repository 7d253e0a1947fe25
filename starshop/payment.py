"""Administration of the payment contract: admin setup, hand-over and upgrades."""

from __future__ import annotations

from starshop.runtime import Address, Env

_WASM_HASH_LENGTH = 32


class PaymentError(Exception):
    """Error reported by the payment contract."""

    NOT_INITIALIZED = 1
    ALREADY_INITIALIZED = 2
    UNAUTHORIZED_ACCESS = 3

    _MESSAGES = {
        NOT_INITIALIZED: "contract is not initialized",
        ALREADY_INITIALIZED: "contract is already initialized",
        UNAUTHORIZED_ACCESS: "unauthorized access",
    }

    def __init__(self, code: int) -> None:
        if code not in self._MESSAGES:
            raise ValueError(f"unknown payment error code: {code}")
        self.code = code
        super().__init__(self._MESSAGES[code])


class PaymentContract:
    """Holds the admin of the payment system and the code it runs."""

    def __init__(self, env: Env) -> None:
        self.env = env
        self._admin: Address | None = None
        self.wasm_hash: bytes | None = None

    def _require_admin(self) -> Address:
        if self._admin is None:
            raise PaymentError(PaymentError.NOT_INITIALIZED)
        return self._admin

    def initialize(self, admin: Address) -> None:
        """Set the admin; allowed once, and the admin must authorize."""
        if self._admin is not None:
            raise PaymentError(PaymentError.ALREADY_INITIALIZED)
        self.env.require_auth(admin)
        self._admin = admin
        self.env.publish(("init",), (admin,))

    def upgrade(self, new_wasm_hash: bytes) -> None:
        """Switch the contract to new code identified by a 32-byte hash; admin only."""
        admin = self._require_admin()
        new_wasm_hash = bytes(new_wasm_hash)
        if len(new_wasm_hash) != _WASM_HASH_LENGTH:
            raise ValueError(
                f"wasm hash must be {_WASM_HASH_LENGTH} bytes, got {len(new_wasm_hash)}"
            )
        self.env.require_auth(admin)
        self.wasm_hash = new_wasm_hash
        self.env.publish(("upgrade",), (admin, new_wasm_hash))

    def get_admin(self) -> Address:
        """Return the current admin."""
        return self._require_admin()

    def transfer_admin(self, new_admin: Address) -> None:
        """Hand admin rights to another address; both sides must authorize."""
        current_admin = self._require_admin()
        self.env.require_auth(current_admin)
        self.env.require_auth(new_admin)
        self._admin = new_admin
        self.env.publish(("adm_xfer",), (current_admin, new_admin))