"""The Command Line Interface for the utility, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface): whatever the command line leaves
out is asked for interactively, unless non-interactive mode is on, in which case defaults are used or the run
fails.

Typical usage example:

    rsacore keygen --bits 2048
    OR
    python -m rsacore emsa --message "Hi there!" --em-len 255 --sha sha256
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import json
import logging
import typing

import rsacore
from rsacore import hashes


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in RSA Core.",
            choices=["keygen", "emsa", "mgf1"],
        ),
    "keygen":
        HelpData("Key generation utility, prints the key components as JSON."),
    "emsa":
        HelpData("EMSA-PKCS1-v1_5 encoding utility."),
    "mgf1":
        HelpData("MGF1 mask generation utility."),
    "bits":
        HelpData(
            description="Key size (in bits).",
            choices=["1024", "2048", "3072", "4096"],
            default="2048",
        ),
    "exponent":
        HelpData(
            description="Exponent for the public key.",
            format=int,
            advanced=True,
            default=65537,
        ),
    "smallest_prime":
        HelpData(
            description="Size in bits above which the key is split into more than two primes.",
            format=int,
            advanced=True,
            default=4096,
        ),
    "native":
        HelpData(
            description="Allow the native (OpenSSL) backend for two-prime keys?",
            choices=["Y", "N"],
            advanced=True,
            default="Y",
        ),
    "message":
        HelpData(
            description="Message to encode (UTF-8).",
            format=str,
        ),
    "em_len":
        HelpData(
            description="Intended length of the encoded message in bytes.",
            format=int,
        ),
    "sha":
        HelpData(description="Specific hash algorithm to use",
                 choices=list(hashes.SUPPORTED_HASHES),
                 advanced=True,
                 default="sha256"),
    "null":
        HelpData(
            description="Include the NULL parameter in the DigestInfo?",
            choices=["Y", "N"],
            advanced=True,
            default="Y",
        ),
    "seed":
        HelpData(
            description="Seed for the mask, hex encoded.",
            format=bytes.fromhex,
        ),
    "mask_len":
        HelpData(
            description="Intended length of the mask in bytes.",
            format=int,
        ),
}

needs = {
    "keygen": ("bits", "exponent", "smallest_prime", "native"),
    "emsa": ("message", "em_len", "sha", "null"),
    "mgf1": ("seed", "mask_len", "sha"),
}

sha = argparse.ArgumentParser(add_help=False)
sha.add_argument("--sha", "-s", choices=help_dict["sha"].choices, help=help_dict["sha"].description)
corep = argparse.ArgumentParser(prog="rsacore")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsacore.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
corep.add_argument("--verbose", "-V", action="store_true", help="Log debug output")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen = commands.add_parser("keygen", help=help_dict["keygen"].description)
keygen.add_argument("--bits", "-b", choices=help_dict["bits"].choices, help=help_dict["bits"].description)
keygen.add_argument("--exponent", "-e", type=help_dict["exponent"].format, help=help_dict["exponent"].description)
keygen.add_argument("--smallest-prime",
                    type=help_dict["smallest_prime"].format,
                    help=help_dict["smallest_prime"].description)
keygen.add_argument("--no-native", dest="native", action="store_const", const="N", help="Never use the native backend")

emsa = commands.add_parser("emsa", parents=[sha], help=help_dict["emsa"].description)
emsa.add_argument("--message", "-m", type=help_dict["message"].format, help=help_dict["message"].description)
emsa.add_argument("--em-len", "-l", type=help_dict["em_len"].format, help=help_dict["em_len"].description)
emsa.add_argument("--no-null", dest="null", action="store_const", const="N", help=help_dict["null"].description)

mgf = commands.add_parser("mgf1", parents=[sha], help=help_dict["mgf1"].description)
mgf.add_argument("--seed", type=help_dict["seed"].format, help=help_dict["seed"].description)
mgf.add_argument("--mask-len", "-l", type=help_dict["mask_len"].format, help=help_dict["mask_len"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default is not None:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    for choice in helper_data.choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    vald = set(helper_data.choices)
    while True:
        ch = input(f"{arg}: ")
        if ch in vald:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if not ch and helper_data.default is not None:
            return helper_data.default
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def key_to_dict(pk: rsacore.RSAPrivKey) -> dict[str, typing.Any]:
    """Flatten a private key into JSON-friendly components."""
    return {
        "bits": pk.get_length(),
        "modulus": pk.mod,
        "publicExponent": pk.pub_exp,
        "privateExponent": pk.priv_exp,
        "primes": dict(pk.primes),
        "exponents": dict(pk.exponents),
        "coefficients": dict(pk.coefficients),
    }


def main(argv: list[str] | None = None):
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    pstatus = (args.non_interactive, args.advanced)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to RSA Core!\n")
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
    match args.subcommand:
        case "keygen":
            pk = rsacore.generate(int(args.bits), args.exponent, args.smallest_prime, args.native == "Y")
            pspr("Private key components:")
            print(json.dumps(key_to_dict(pk), indent=2))
        case "emsa":
            if args.null == "Y":
                em = rsacore.emsa_pkcs1_v15_encode(args.message, args.em_len, args.sha)
            else:
                em = rsacore.emsa_pkcs1_v15_encode_without_null(args.message, args.em_len, args.sha)
            pspr("Encoded message:")
            print(em.hex())
        case "mgf1":
            mask = rsacore.mgf1(args.seed, args.mask_len, args.sha)
            pspr("Mask:")
            print(mask.hex())
    pspr("Thank you for using RSA Core!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
