"""Outcome types of every transform and the statistics attached to successful ones.

A transform ends either in `Success`, carrying the output and its `Stats`, or in `Failure`, carrying an `ErrorKind`
for programs and an explanation for people. Neither is retained by rsaflow once returned.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import typing

from rsaflow.primitive import Direction


class ErrorKind(enum.Enum):
    INVALID_KEY_FORMAT = "invalid_key_format"
    EMPTY_INPUT = "empty_input"
    MALFORMED_CIPHERTEXT = "malformed_ciphertext"
    TRANSFORM_FAILED = "transform_failed"
    GENERATION_FAILED = "generation_failed"
    PRIMITIVE_UNAVAILABLE = "primitive_unavailable"


EXPLANATIONS: dict[ErrorKind, tuple[str, tuple[str, ...]]] = {
    ErrorKind.INVALID_KEY_FORMAT: (
        "The key does not have a valid format.",
        ("The key was not copied completely, including its BEGIN and END lines.",
         "The other half of the key pair was supplied."),
    ),
    ErrorKind.EMPTY_INPUT: (
        "A required input is empty.",
        ("The key field was left empty.", "The text field was left empty."),
    ),
    ErrorKind.MALFORMED_CIPHERTEXT: (
        "The ciphertext does not look like valid Base64.",
        ("The ciphertext was altered or only partially copied.",),
    ),
    ErrorKind.TRANSFORM_FAILED: (
        "The text could not be transformed.",
        ("Mismatched keys: the key does not belong to the pair used for the other direction.",
         "Corrupted ciphertext: the ciphertext is incomplete or was modified.",
         "Invalid format: the key or the ciphertext has an incorrect format."),
    ),
    ErrorKind.GENERATION_FAILED: (
        "The key pair could not be generated.",
        ("The requested modulus size is not supported.",),
    ),
    ErrorKind.PRIMITIVE_UNAVAILABLE: (
        "The cryptographic library is not available.",
        ("The cryptography package is not installed or failed to load.",),
    ),
}


class TransformError(RuntimeError):
    """Raised inside the core whenever a transform cannot proceed; converted to `Failure` at the boundary.

    Attributes:
        kind: The failure category.
        detail: Human-readable explanation.
    """

    def __init__(self, kind: ErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail if detail is not None else EXPLANATIONS[kind][0]
        super().__init__(self.detail)


class Stats(typing.NamedTuple):
    input_length: int
    output_length: int
    ratio_percent: float

    @property
    def ratio_text(self) -> str:
        return f"{self.ratio_percent:.2f}"


class Success(typing.NamedTuple):
    """A completed transform.

    Attributes:
        output: Ciphertext when encrypting, recovered plaintext when decrypting.
        stats: Lengths and the expansion or reduction ratio.
        direction: Which transform produced the output.
        advisories: Non-fatal warnings raised while admitting the request.
    """
    output: str
    stats: Stats
    direction: Direction
    advisories: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return True


class Failure(typing.NamedTuple):
    """A transform that did not complete.

    Attributes:
        kind: Machine-usable failure category.
        detail: Human-readable explanation.
        causes: Possible causes, listed since the primitive rarely allows a single diagnosis.
    """
    kind: ErrorKind
    detail: str
    causes: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return False


TransformResult = Success | Failure


def failure(kind: ErrorKind, detail: str | None = None) -> Failure:
    """Builds a `Failure` with the standard explanation and causes of `kind`."""
    default, causes = EXPLANATIONS[kind]
    return Failure(kind, detail if detail is not None else default, causes)


def from_error(exc: TransformError) -> Failure:
    return failure(exc.kind, exc.detail)


def package_success(input_text: str, output_text: str, direction: Direction) -> Stats:
    """Computes the statistics of a successful transform.

    Encryption reports expansion, `output / input * 100`. Decryption reports reduction, `(1 - output / input) * 100`.
    Both are rounded to two decimals. Empty input never gets here as it is rejected during admission.

    Args:
        input_text: The payload handed to the primitive.
        output_text: What the primitive returned.
        direction: Selects the formula.

    Returns:
        The lengths of both texts and the ratio.
    """
    inlen, outlen = len(input_text), len(output_text)
    if direction is Direction.ENCRYPT:
        ratio = outlen / inlen * 100
    else:
        ratio = (1 - outlen / inlen) * 100
    return Stats(inlen, outlen, round(ratio, 2))
