#!/usr/bin/env python3
"""
Transfer Example: Creating and Redeeming a Transfer Token

Uses the blocking API end to end:
- Creating a payer and a payee
- Linking a bank account from a bank authorization
- Building, endorsing and redeeming a transfer token
- Paging through the payer's transfer tokens

Requirements:
- TOKEN_DEV_KEY set to a developer key
- TOKEN_BANK_AUTHORIZATION path to a JSON bank authorization from the sandbox bank
"""

import json
import logging
import os
from pathlib import Path
import sys

# Add the src directory to the path so we can import the SDK modules
project_dir = Path(__file__).parent.parent
src_dir = project_dir / "src"
sys.path.insert(0, str(src_dir))

from tokenio_sdk import Alias, AliasType, InMemoryKeyStore, TokenIO, TransferTokenError
from tokenio_sdk.core.exceptions import RPCError, TokenArgumentsError

from token_request_example import ExampleCryptoEngine

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    print("Token SDK Transfer Example")
    print("=" * 50)

    with open(os.environ['TOKEN_BANK_AUTHORIZATION']) as f:
        bank_authorization = json.load(f)

    token_io = TokenIO.builder() \
        .sandbox() \
        .dev_key(os.environ['TOKEN_DEV_KEY']) \
        .with_key_store(InMemoryKeyStore(), ExampleCryptoEngine) \
        .build()

    with token_io:
        payer = token_io.create_member(Alias(type=AliasType.EMAIL, value="payer@example.com"))
        payee = token_io.create_member(Alias(type=AliasType.EMAIL, value="payee@example.com"))
        print(f"Payer: {payer.member_id}, payee: {payee.member_id}")

        accounts = payer.link_accounts(bank_authorization)
        account = accounts[0]
        print(f"Linked account {account.id}, balance {account.get_current_balance()}")

        try:
            token = payer.create_transfer_token(10, "EUR") \
                .set_account_id(account.id) \
                .set_to_member_id(payee.member_id) \
                .set_description("Book purchase") \
                .execute()
        except TokenArgumentsError as e:
            print(f"Token is missing {e.field}: {e.message}")
            return
        except TransferTokenError as e:
            print(f"Bank refused the token: {e.status}")
            return

        result = payer.endorse_token(token)
        print(f"Endorsed token {token.id}: {result.status}")

        try:
            transfer = payee.redeem_token(result.token, 5, ref_id="example-redeem-1")
            print(f"Transfer {transfer.id}: {transfer.status}")
        except RPCError as e:
            print(f"Redeem failed with {e.status}: {e.message}")

        page = payer.get_transfer_tokens(None, 10)
        for t in page:
            print(f"  {t.id}: {t.payload.transfer.lifetime_amount} {t.payload.transfer.currency}")


if __name__ == "__main__":
    main()
