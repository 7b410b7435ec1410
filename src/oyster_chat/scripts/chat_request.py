#!/usr/bin/env python3
"""
Send one prompt to the enclave chat endpoint and recover the response signer.

Prints the status, headers and body of the reply, then the x-signature value
and the public key recovered from it. Compare that key with the output of

    oyster-cvm kms-derive --image-id <IMAGE_ID> --path signing-server \\
        --key-type secp256k1/public

or pass it via --expect-key to have the comparison done here.

Exit code:
  0 = reply received (and, with --expect-key, the recovered key matches)
  1 = request failed, or the key is missing or does not match

Typical usage:
  CHAT_API_URL=http://127.0.0.1:3000/api/chat-v2 oyster-chat "Hello!"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from oyster_chat.core.log import configure_logging
from oyster_chat.core.settings import settings
from oyster_chat.services.chat import ChatClient, ChatRequestError, ChatTurn
from oyster_chat.services.crypto import keys_match
from oyster_chat.services.transport import TransportError
from oyster_chat.services.verification import Recovered
from oyster_chat.utils.text import split_think_content

logger = logging.getLogger(__name__)


def say(msg: str) -> None:
    print(msg)


def fail(msg: str) -> None:
    print(f"[oyster-chat][FAIL] {msg}", file=sys.stderr)


def report(turn: ChatTurn) -> None:
    response = turn.response
    say(f"Status: {response.status_code} {response.reason_phrase}".rstrip())
    say(f"Headers: {dict(response.headers.items())}")
    say(f"Body: {response.text}")
    think, reply = split_think_content(turn.assistant_message.content)
    if think is not None:
        say(f"Thinking: {think}")
    say(f"Reply: {reply}")
    say(f"Signature: {turn.assistant_message.signature or '-'}")
    outcome = turn.verification
    if isinstance(outcome, Recovered):
        say(f"Recovered public key: {outcome.public_key_hex}")
    else:
        detail = f" ({outcome.detail})" if outcome.detail else ""
        say(f"Recovered public key: none [{outcome.reason.value}]{detail}")


async def run(args: argparse.Namespace) -> int:
    client = ChatClient(url=args.url, model=args.model)
    try:
        turn = await client.send([], args.prompt)
    except (ChatRequestError, TransportError, ValueError) as exc:
        fail(str(exc))
        return 1

    report(turn)

    if args.expect_key:
        outcome = turn.verification
        if not isinstance(outcome, Recovered):
            fail("No key recovered; cannot compare with the expected key")
            return 1
        if not keys_match(outcome.public_key, args.expect_key):
            fail("Recovered key does not match the expected key")
            return 1
        say("Recovered key matches the expected key")
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Send a prompt to an Oyster enclave and verify the reply")
    p.add_argument("prompt", nargs="?", default="Hello!", help="Prompt to send (default: Hello!)")
    p.add_argument("--url", default=settings.chat_api_url, help="Chat endpoint (CHAT_API_URL)")
    p.add_argument("--model", default=settings.chat_model, help="Model name (CHAT_MODEL)")
    p.add_argument("--expect-key", default=None, help="KMS-derived public key (hex) to compare with")
    p.add_argument("--log-level", default=settings.log_level, help="Logging level (LOG_LEVEL)")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    logger.debug("Sending prompt to %s with model %s", args.url, args.model)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
