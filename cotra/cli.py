#!/usr/bin/env python3
"""
COTRA Tracer Command Line Interface

Simulates devices and the authority with JSON files.

Usage:
    cotra-tracer create-authority [--path authority.json]
    cotra-tracer new-identity [--path me.json]
    cotra-tracer new-share-identity --public-key <key> [--path me.json]
    cotra-tracer add-contact --share-id <share-id> [--path me.json]
    cotra-tracer import-infected [--authority-path authority.json] [--identity-path me.json]
    cotra-tracer check-status [--authority-path authority.json] [--path me.json]

Exit codes: 0 success, 1 contact log could not be decoded, 2 parse error.
"""

import argparse
import sys
from typing import List, Optional

from cotra.crypto.encryption import PublicKey
from cotra.errors import ParseError
from cotra.protocol.exposure import ExposureStatus
from cotra.protocol.identity import ShareIdentity
from cotra.registry import AuthorityDb, Device, load_json, save_json

DEFAULT_AUTHORITY_PATH = "authority.json"
DEFAULT_IDENTITY_PATH = "me.json"

STATUS_MESSAGES = {
    ExposureStatus.INFECTED: "You're infected",
    ExposureStatus.TAINTED: "You're tainted",
    ExposureStatus.CLEAR: "You're clear",
}


def load_authority(path: str) -> AuthorityDb:
    return load_json(path, AuthorityDb, AuthorityDb.from_dict)


def load_device(path: str) -> Device:
    return load_json(path, Device, Device.from_dict)


def cmd_create_authority(args):
    """Create the authority file (or reuse it) and print the public key."""
    db = load_authority(args.path)
    save_json(args.path, db)
    print(f"Public Key: {db.authority.public_key}")
    return 0


def cmd_new_identity(args):
    """Rotate to a new identity."""
    device = load_device(args.path)
    identity = device.rotate()
    save_json(args.path, device)
    print(f"Hashed ID: {identity.hashed_id}")
    return 0


def cmd_new_share_identity(args):
    """Print a fresh share identity for the current identity."""
    public_key = PublicKey.from_string(args.public_key)
    device = load_device(args.path)
    if not device.identities:
        device.current_identity()
        save_json(args.path, device)
    share_id = device.current_identity().new_share_id(public_key)
    print(share_id)
    return 0


def cmd_add_contact(args):
    """Record a share identity received from another device."""
    share_id = ShareIdentity.from_string(args.share_id)
    device = load_device(args.path)
    device.contacts.add(share_id)
    save_json(args.path, device)
    return 0


def cmd_import_infected(args):
    """Mark a device as infected and its contacts as tainted."""
    db = load_authority(args.authority_path)
    device = load_device(args.identity_path)

    report = db.import_infected(device)
    if report is None:
        print("Error: could not decode contact log", file=sys.stderr)
        return 1

    save_json(args.authority_path, db)
    print(f"Infected: {len(report.infected)}")
    if report.exposure_found:
        print(f"Tainted: {len(report.tainted)}")
    else:
        print("No exposure found")
    return 0


def cmd_check_status(args):
    """Check whether this device is infected, tainted or clear."""
    db = load_authority(args.authority_path)
    device = load_device(args.path)
    print(STATUS_MESSAGES[db.check_status(device)])
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cotra-tracer",
        description="Example app for the COTRA contact tracing protocol"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("create-authority", help="Create a new authority")
    p.add_argument("--path", default=DEFAULT_AUTHORITY_PATH, help="Path to authority file")
    p.set_defaults(func=cmd_create_authority)

    p = subparsers.add_parser("new-identity", help="Create a new identity")
    p.add_argument("--path", default=DEFAULT_IDENTITY_PATH, help="Path to identity file")
    p.set_defaults(func=cmd_new_identity)

    p = subparsers.add_parser("new-share-identity", help="Create a new share identity")
    p.add_argument("--path", default=DEFAULT_IDENTITY_PATH, help="Path to identity file")
    p.add_argument("--public-key", required=True, help="The authority public key")
    p.set_defaults(func=cmd_new_share_identity)

    p = subparsers.add_parser("add-contact", help="Add a contact")
    p.add_argument("--path", default=DEFAULT_IDENTITY_PATH, help="Path to identity file")
    p.add_argument("--share-id", required=True, help="The share identity to add")
    p.set_defaults(func=cmd_add_contact)

    p = subparsers.add_parser("import-infected", help="Add contacts as taints")
    p.add_argument("--authority-path", default=DEFAULT_AUTHORITY_PATH, help="Path to authority file")
    p.add_argument("--identity-path", default=DEFAULT_IDENTITY_PATH, help="Path to identity file")
    p.set_defaults(func=cmd_import_infected)

    p = subparsers.add_parser("check-status", help="Check the status")
    p.add_argument("--authority-path", default=DEFAULT_AUTHORITY_PATH, help="Path to authority file")
    p.add_argument("--path", default=DEFAULT_IDENTITY_PATH, help="Path to identity file")
    p.set_defaults(func=cmd_check_status)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
