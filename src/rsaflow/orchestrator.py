"""Sequences admission, primitive invocation and packaging of every transform.

Each transform runs in two phases so a caller can show progress before the comparatively slow primitive call:
`begin_transform` validates and hands back a `PendingTransform`, `complete_transform` performs the work. The
one-shot helpers `encrypt`, `decrypt` and `generate` run both phases with a short fixed pause in between.

Key roles follow `KeyConvention.SIGNING` unless told otherwise: the private key encrypts and the public key
decrypts. This demonstrates key correspondence, not confidentiality.

Typical usage example:

    transformer = Transformer()
    pair = transformer.generate()
    c = transformer.encrypt(pair.private_key, "Hi there!")
    r = transformer.decrypt(pair.public_key, c.output)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import datetime
import enum
import importlib
import logging
import time
import typing

from rsaflow import codec
from rsaflow import results
from rsaflow import validator
from rsaflow.codec import KeyKind
from rsaflow.codec import KeyMaterial
from rsaflow.primitive import Direction
from rsaflow.primitive import KeyRole
from rsaflow.primitive import PrimitiveProvider
from rsaflow.results import ErrorKind
from rsaflow.results import Failure
from rsaflow.results import Success
from rsaflow.results import TransformError
from rsaflow.results import TransformResult
from rsaflow.validator import KeyConvention

DEFAULT_MODULUS_BITS = 2048
PROCESSING_DELAY = 0.1

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVOKING = "invoking"
    COMPLETED = "completed"


class Operation(enum.Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    GENERATE = "generate"


DIRECTIONS = {
    Operation.ENCRYPT: Direction.ENCRYPT,
    Operation.DECRYPT: Direction.DECRYPT,
}


class KeyPair(typing.NamedTuple):
    """A freshly generated key pair.

    The halves are passed through from the provider untouched; their correspondence is never checked here.

    Attributes:
        public_key: The public half.
        private_key: The private half.
        created_at: UTC time at which generation completed.
        modulus_bits: The modulus size that was requested.
        algorithm: Always "RSA".
    """
    public_key: KeyMaterial
    private_key: KeyMaterial
    created_at: datetime.datetime
    modulus_bits: int
    algorithm: str = "RSA"

    @property
    def ok(self) -> bool:
        return True


Outcome = TransformResult | KeyPair


class PendingTransform:
    """Token for a single transform, owned by the caller between the two phases.

    A request rejected during admission is already `Phase.COMPLETED` when returned. An admitted one stays in
    `Phase.VALIDATING` until `Transformer.complete_transform` is called on it.
    """

    def __init__(self,
                 operation: Operation,
                 key: KeyMaterial | None = None,
                 payload: str | None = None,
                 modulus_bits: int = DEFAULT_MODULUS_BITS) -> None:
        self.operation = operation
        self.key = key
        self.payload = payload
        self.modulus_bits = modulus_bits
        self.advisories: tuple[str, ...] = ()
        self.provider: PrimitiveProvider | None = None
        self.phase = Phase.IDLE
        self.outcome: Outcome | None = None

    @property
    def done(self) -> bool:
        return self.phase is Phase.COMPLETED

    def settle(self, outcome: Outcome) -> Outcome:
        self.phase = Phase.COMPLETED
        self.outcome = outcome
        self.provider = None
        return outcome


def load_default_provider() -> PrimitiveProvider:
    """Loads the cryptography-backed provider.

    Raises:
        TransformError: With `ErrorKind.PRIMITIVE_UNAVAILABLE` if the backend cannot be imported.
    """
    try:
        backend = importlib.import_module("rsaflow.backend")
    except ImportError as exc:
        raise TransformError(ErrorKind.PRIMITIVE_UNAVAILABLE,
                             f"The cryptographic library could not be loaded: {exc}") from exc
    return backend.CryptographyProvider()


def _as_material(key: KeyMaterial | str | None) -> KeyMaterial:
    if key is None:
        raise TypeError("A key is required for this operation.")
    if isinstance(key, KeyMaterial):
        return key
    return codec.classify(key)


class Transformer:
    """Runs transforms against a primitive provider.

    Holds only configuration; every transform lives in its own `PendingTransform`, so a single instance may serve
    any number of independent calls.

    Attributes:
        provider: The primitive provider, or None to load the cryptography backend on demand.
        convention: Which key kind each direction requires.
        delay: Seconds the one-shot helpers pause between the two phases.
        on_processing: Called without arguments once a request has been admitted.
    """

    def __init__(self,
                 provider: PrimitiveProvider | None = None,
                 convention: KeyConvention = KeyConvention.SIGNING,
                 delay: float = PROCESSING_DELAY,
                 on_processing: typing.Callable[[], None] | None = None) -> None:
        self.provider = provider
        self.convention = convention
        self.delay = delay
        self.on_processing = on_processing

    def _resolve_provider(self) -> PrimitiveProvider:
        if self.provider is not None:
            return self.provider
        return load_default_provider()

    def begin_transform(self,
                        operation: Operation,
                        key: KeyMaterial | str | None = None,
                        payload: str | None = None,
                        modulus_bits: int = DEFAULT_MODULUS_BITS) -> PendingTransform:
        """Validates a request and signals processing if it was admitted.

        Args:
            operation: What to do.
            key: Key material or raw key text. Required unless generating.
            payload: Plaintext or ciphertext. Required unless generating.
            modulus_bits: Modulus size, only used when generating.

        Returns:
            The pending transform. Already completed with a `Failure` if admission failed.

        The payload is trimmed once here; validation, the provider and the stats all see the trimmed text.

        Raises:
            TypeError: If a required key or payload is missing or not text.
        """
        if operation is Operation.GENERATE:
            if not isinstance(modulus_bits, int):
                raise TypeError("Modulus size must be an integer.")
            pending = PendingTransform(operation, modulus_bits=modulus_bits)
        else:
            if not isinstance(payload, str):
                raise TypeError(f"Payload must be str, not {type(payload).__name__}.")
            pending = PendingTransform(operation, _as_material(key), payload.strip())
        pending.phase = Phase.VALIDATING
        try:
            if operation is Operation.ENCRYPT:
                pending.advisories = tuple(validator.admit_encrypt(pending.key, pending.payload, self.convention))
            elif operation is Operation.DECRYPT:
                validator.admit_decrypt(pending.key, pending.payload, self.convention)
            pending.provider = self._resolve_provider()
        except TransformError as exc:
            logger.info("Rejected %s request: %s", operation.value, exc.kind.value)
            pending.settle(results.from_error(exc))
            return pending
        if self.on_processing is not None:
            self.on_processing()
        return pending

    def complete_transform(self, pending: PendingTransform) -> Outcome:
        """Invokes the primitive for an admitted request and packages the outcome.

        Completing an already completed transform returns its stored outcome without touching the provider.

        Args:
            pending: The token returned by `begin_transform`.

        Returns:
            `Success` or `Failure` for transforms, `KeyPair` or `Failure` for generation.
        """
        if pending.done:
            return pending.outcome
        pending.phase = Phase.INVOKING
        try:
            if pending.operation is Operation.GENERATE:
                outcome = self._generate(pending)
            else:
                outcome = self._transform(pending)
        except TransformError as exc:
            logger.warning("%s failed: %s", pending.operation.value.capitalize(), exc.kind.value)
            outcome = results.from_error(exc)
        return pending.settle(outcome)

    def _transform(self, pending: PendingTransform) -> Success:
        direction = DIRECTIONS[pending.operation]
        key = pending.key
        payload = pending.payload
        output = pending.provider.transform(key.text, KeyRole(key.kind.value), payload, direction)
        if not output:
            if direction is Direction.ENCRYPT:
                detail = (f"Could not encrypt the text. Check that the key is valid and is an RSA {key.kind.value} "
                          "key.")
            else:
                other = KeyKind.PUBLIC if key.kind is KeyKind.PRIVATE else KeyKind.PRIVATE
                detail = (f"Could not decrypt the text. Check that the {key.kind.value} key belongs to the same pair "
                          f"as the {other.value} key used to encrypt it.")
            raise TransformError(ErrorKind.TRANSFORM_FAILED, detail)
        stats = results.package_success(payload, output, direction)
        logger.debug("%s succeeded: %d -> %d characters (%s%%)", direction.value.capitalize(), stats.input_length,
                     stats.output_length, stats.ratio_text)
        return Success(output, stats, direction, pending.advisories)

    def _generate(self, pending: PendingTransform) -> KeyPair:
        private_pem, public_pem = pending.provider.generate_key_pair(pending.modulus_bits)
        if not private_pem or not public_pem:
            raise TransformError(ErrorKind.GENERATION_FAILED,
                                 f"Could not generate a {pending.modulus_bits}-bit key pair.")
        created_at = datetime.datetime.now(datetime.timezone.utc)
        logger.debug("Generated %d-bit key pair at %s", pending.modulus_bits, created_at.isoformat())
        return KeyPair(codec.classify(public_pem), codec.classify(private_pem), created_at, pending.modulus_bits)

    def _run(self, pending: PendingTransform) -> Outcome:
        if not pending.done:
            time.sleep(self.delay)
        return self.complete_transform(pending)

    def encrypt(self, private_key: KeyMaterial | str, plaintext: str) -> TransformResult:
        """Encrypts plaintext, with the private key under the signing convention.

        Args:
            private_key: Key material or raw PEM text.
            plaintext: The text to encrypt.

        Returns:
            `Success` holding Base64 ciphertext, or `Failure`.
        """
        return self._run(self.begin_transform(Operation.ENCRYPT, private_key, plaintext))

    def decrypt(self, public_key: KeyMaterial | str, ciphertext: str) -> TransformResult:
        """Recovers plaintext, with the public key under the signing convention.

        Args:
            public_key: Key material or raw PEM text.
            ciphertext: Base64 ciphertext; whitespace is tolerated.

        Returns:
            `Success` holding the plaintext, or `Failure`.
        """
        return self._run(self.begin_transform(Operation.DECRYPT, public_key, ciphertext))

    def generate(self, modulus_bits: int = DEFAULT_MODULUS_BITS) -> KeyPair | Failure:
        """Generates a key pair of the given modulus size."""
        return self._run(self.begin_transform(Operation.GENERATE, modulus_bits=modulus_bits))
