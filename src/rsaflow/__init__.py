"""RSA key-pair lifecycle and message transforms.

Generates RSA key pairs, classifies PEM key text and transforms short messages with one half of a pair so the other
half can recover them. By default the private key encrypts and the public key decrypts, demonstrating key
correspondence the way a signature does; this provides no confidentiality.

Typical usage example:

    transformer = Transformer()
    pair = transformer.generate(2048)
    c = transformer.encrypt(pair.private_key, "Hi there!")
    r = transformer.decrypt(pair.public_key, c.output)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsaflow.codec import classify
from rsaflow.codec import inspect_key
from rsaflow.codec import KeyKind
from rsaflow.codec import KeyMaterial
from rsaflow.orchestrator import KeyPair
from rsaflow.orchestrator import Operation
from rsaflow.orchestrator import PendingTransform
from rsaflow.orchestrator import Transformer
from rsaflow.primitive import Direction
from rsaflow.primitive import KeyRole
from rsaflow.results import ErrorKind
from rsaflow.results import Failure
from rsaflow.results import Stats
from rsaflow.results import Success
from rsaflow.results import TransformError
from rsaflow.validator import KeyConvention

__version__ = "0.1.0"
__all__ = [
    "Transformer",
    "PendingTransform",
    "Operation",
    "KeyPair",
    "KeyConvention",
    "KeyKind",
    "KeyMaterial",
    "KeyRole",
    "Direction",
    "ErrorKind",
    "TransformError",
    "Success",
    "Failure",
    "Stats",
    "classify",
    "inspect_key",
]
