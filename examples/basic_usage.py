#!/usr/bin/env python3
"""Basic usage example for dracoclient.

This example demonstrates:
1. Building a service call argument list with a record
2. Encoding it to the tagged wire format
3. Decoding a response into a generic value tree
4. Projecting the fields the caller needs
"""

from __future__ import annotations

from dracoclient import WireBytes, WireInt, WireRecord, decode, encode
from dracoclient.client import default_client_info
from dracoclient.models import AuthData, AuthType, RegistrationInfo


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("dracoclient Basic Usage Example")
    print("=" * 60)
    print()

    # Sign-in arguments as the client sends them
    print("1. Building trySingIn arguments...")
    client_info = default_client_info()
    args = [
        AuthData(auth_type=AuthType.DEVICE, profile_id="device-1"),
        client_info,
        RegistrationInfo(),
    ]
    print(f"   Device model: {client_info.device_model}")
    print(f"   Screen: {client_info.screen_width}x{client_info.screen_height}")
    print()

    print("2. Encoding...")
    data = encode(args)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   First bytes (hex): {data[:16].hex()}")
    print()

    print("3. Decoding the same payload...")
    value = decode(data)
    print(f"   Elements: {len(value.as_sequence())}")
    print(f"   profileId: {value.project('0.profileId').as_text()}")
    print(f"   platform: {value.project('1.platform').as_text()}")
    print()

    # A response the service might send back
    print("4. Reading a sign-in response...")
    response = encode(
        WireRecord(
            "AuthResult",
            (
                (
                    "info",
                    WireRecord(
                        "FAuthInfo",
                        (("userId", WireBytes(b"abc123")), ("avatarAppearanceDetails", WireInt(7))),
                    ),
                ),
            ),
        )
    )
    result = decode(response)
    print(f"   userId: {result.project('info.userId').as_text()}")
    print(f"   avatar: {result.project('info.avatarAppearanceDetails').as_int()}")
    print()

    print("=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
