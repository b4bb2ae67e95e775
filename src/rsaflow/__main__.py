"""The Command Line Interface for rsaflow, including Interactive elements.

A hybrid CLI/ICLI that asks interactively for whatever the command line left out, unless non-interactive mode is
requested, in which case missing arguments without a default are an error.

Typical usage example:

    rsaflow keygen
    OR
    python -m rsaflow encrypt --key private.pem --message "Hi there!"
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import pathlib
import sys
import typing

import rsaflow
from rsaflow import codec


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in rsaflow.",
            choices=["keygen", "encrypt", "decrypt"],
        ),
    "keygen":
        HelpData("Generate a key pair and print both halves."),
    "encrypt":
        HelpData("Encrypt a message."),
    "decrypt":
        HelpData("Decrypt a message."),
    "key":
        HelpData(
            description="Location of the PEM key file.",
            format=pathlib.Path,
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "keysize":
        HelpData(
            description="Key size (in bits).",
            choices=["2048", "3072", "4096"],
            default="2048",
        ),
    "convention":
        HelpData(
            description="Which key encrypts. `signing` encrypts with the private key and provides no secrecy.",
            choices=["signing", "confidentiality"],
            advanced=True,
            default="signing",
        ),
}

needs = {
    "keygen": ("keysize",),
    "encrypt": ("key", "message", "convention"),
    "decrypt": ("key", "message", "convention"),
}

keyp = argparse.ArgumentParser(add_help=False)
keyp.add_argument("--key", "-k", type=help_dict["key"].format, help=help_dict["key"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", "-m", type=help_dict["message"].format, help=help_dict["message"].description)
conv = argparse.ArgumentParser(add_help=False)
conv.add_argument("--convention",
                  "-c",
                  choices=help_dict["convention"].choices,
                  help=help_dict["convention"].description)
corep = argparse.ArgumentParser(prog="rsaflow")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsaflow.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
corep.add_argument("--verbose", action="store_true", help="Log progress to stderr")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen = commands.add_parser("keygen", help=help_dict["keygen"].description)
keygen.add_argument("--keysize", choices=help_dict["keysize"].choices, help=help_dict["keysize"].description)
encrypt = commands.add_parser("encrypt", parents=[keyp, payloads, conv], help=help_dict["encrypt"].description)
decrypt = commands.add_parser("decrypt", parents=[keyp, payloads, conv], help=help_dict["decrypt"].description)


def preset_value(arg: str, mode: tuple[bool, bool]) -> typing.Any:
    """Returns the value to use without asking, or None if the user has to be prompted.

    Defaults are taken silently in non-interactive mode, and for advanced settings unless advanced mode is on.
    """
    helper_data = help_dict[arg]
    if helper_data.default is not None and (mode[0] or (helper_data.advanced and not mode[1])):
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return None


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print) -> str:
    preset = preset_value(arg, mode)
    if preset is not None:
        return preset
    helper_data = help_dict[arg]
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    for choice in helper_data.choices:
        listed = f"{choice} - {help_dict[choice].description}" if choice in help_dict else choice
        prntr(listed + (" (Default)" if choice == helper_data.default else ""))
    if helper_data.default is not None:
        prntr(f"Press enter to keep {helper_data.default}.")
    while True:
        answer = input(f"{arg}: ").strip()
        if not answer and helper_data.default is not None:
            return helper_data.default
        if answer in helper_data.choices:
            return answer
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    """Prompts for a key path or message. Blank answers are asked again."""
    preset_value(arg, mode)
    helper_data = help_dict[arg]
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    answer = input(f"{arg}: ")
    while not answer.strip():
        prntr("Please provide a value.")
        answer = input(f"{arg}: ")
    return helper_data.format(answer.strip())


def check_message(mess: str) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        with open(mess[2:], "r", encoding="utf-8") as f:
            mess = f.read()
    return mess


def render(outcome, prntr: typing.Callable = print) -> int:
    """Print a transform outcome. Returns the exit status."""
    if not outcome.ok:
        print(f"Error ({outcome.kind.value}): {outcome.detail}", file=sys.stderr)
        if outcome.causes:
            print("Possible causes:", file=sys.stderr)
            for cause in outcome.causes:
                print(f"  - {cause}", file=sys.stderr)
        return 1
    for advisory in outcome.advisories:
        print(f"Warning: {advisory}", file=sys.stderr)
    prntr("Output:")
    print(outcome.output)
    stats = outcome.stats
    label = "Expansion" if outcome.direction is rsaflow.Direction.ENCRYPT else "Reduction"
    prntr(f"Input length: {stats.input_length} characters")
    prntr(f"Output length: {stats.output_length} characters")
    prntr(f"{label}: {stats.ratio_text}%")
    return 0


def main():
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args()
    pstatus = (args.non_interactive, args.advanced)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to rsaflow!\n")
    if not args.subcommand:
        args.subcommand = choice_handler("subcommand", pstatus)
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            if help_dict[reqs].choices is not None:
                res = choice_handler(reqs, pstatus)
            else:
                res = input_handler(reqs, pstatus)
            setattr(args, reqs, res)
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    transformer = rsaflow.Transformer(
        convention=rsaflow.KeyConvention(getattr(args, "convention", "signing")),
        on_processing=lambda: pspr("Processing..."),
    )
    match args.subcommand:
        case "keygen":
            pair = transformer.generate(int(args.keysize))
            if not pair.ok:
                sys.exit(render(pair))
            pspr(f"Created: {pair.created_at.isoformat()}")
            pspr(f"Algorithm: {pair.algorithm}, {codec.inspect_key(pair.public_key).modulus_bits} bits")
            pspr("Public key (shareable):")
            print(pair.public_key.text)
            pspr("Private key (keep secret!):")
            print(pair.private_key.text)
        case "encrypt" | "decrypt":
            message = check_message(args.message)
            with open(args.key, "r", encoding="ascii") as f:
                key = f.read()
            if args.subcommand == "encrypt":
                outcome = transformer.encrypt(key, message)
            else:
                outcome = transformer.decrypt(key, message)
            status = render(outcome, pspr)
            if status:
                sys.exit(status)
    pspr("Thank you for using rsaflow!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
