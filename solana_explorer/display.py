"""Terminal rendering of inspection results."""

import base64
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from solana_explorer.constants import PROGRAM_NAMES
from solana_explorer.layouts.token import ExtensionTag, ExtensionType, MintState
from solana_explorer.models.account import (
    OtherAccount,
    ParsedAccount,
    SystemAccount,
    Token22MintAccount,
    Token22TokenAccount,
    TokenkegMintAccount,
    TokenkegTokenAccount,
)
from solana_explorer.models.block import BlockScanResult, ParsedBlock
from solana_explorer.models.transaction import ParsedTransaction
from solana_explorer.utils.formatting import (
    display_balance,
    display_sol,
    format_fee,
    format_integer,
    format_rewards,
    format_version,
)

# Shown in place of an absent authority
ZERO_KEY = "11111111111111111111111111111111"


def _console(console: Optional[Console]) -> Console:
    return console or Console()


def kv_table(title: str, data: Dict[str, Any]) -> Table:
    t = Table(title=title, box=box.SIMPLE, show_header=False, expand=False)
    t.add_column("Key", style="bold cyan")
    t.add_column("Value", overflow="fold")
    for k, v in data.items():
        t.add_row(str(k), v if isinstance(v, Text) else str(v))
    return t


def rows_table(title: str, columns: Iterable[str], rows: Iterable[Iterable[Any]]) -> Table:
    t = Table(title=title, box=box.MINIMAL_DOUBLE_HEAD, expand=False)
    for col in columns:
        t.add_column(str(col))
    for r in rows:
        t.add_row(*[x if isinstance(x, Text) else str(x) for x in r])
    return t


def extension_name(tag: ExtensionTag) -> str:
    if isinstance(tag, ExtensionType):
        return tag.display_name
    return f"Unknown({tag})"


def program_label(program_id: str) -> str:
    name = PROGRAM_NAMES.get(program_id)
    return f"{name} ({program_id})" if name else program_id


def _mint_rows(mint: MintState) -> Dict[str, Any]:
    return {
        "Decimals": mint.decimals,
        "Supply": display_balance(mint.supply, mint.decimals),
        "Mint authority": mint.mint_authority or ZERO_KEY,
        "Freeze authority": mint.freeze_authority or ZERO_KEY,
    }


def render_account(account: ParsedAccount, console: Optional[Console] = None) -> None:
    """Print any classified account."""
    cn = _console(console)

    if isinstance(account, SystemAccount):
        cn.print(kv_table(f"System account {account.key}", {"Balance": f"◎{display_sol(account.lamports)}"}))
        if account.token_accounts:
            cn.print(rows_table(
                "Token accounts",
                ("Account", "Token", "Balance", "Standard"),
                (
                    (ta.key, ta.symbol or ta.mint, ta.balance, ta.program)
                    for ta in account.token_accounts
                ),
            ))
        return

    if isinstance(account, (TokenkegTokenAccount, Token22TokenAccount)):
        state = account.token_account if isinstance(account, TokenkegTokenAccount) else account.token_account.base
        rows: Dict[str, Any] = {}
        if account.symbol:
            rows["Symbol"] = account.symbol
        rows["Mint"] = state.mint
        rows["Owner"] = state.owner
        rows["Balance"] = account.balance
        if isinstance(account, Token22TokenAccount):
            for i, tag in enumerate(account.extensions):
                rows[f"Extension {i}"] = extension_name(tag)
        cn.print(kv_table(f"Token account {account.key}", rows))
        return

    if isinstance(account, TokenkegMintAccount):
        cn.print(kv_table(f"Mint {account.key}", _mint_rows(account.mint)))
        return

    if isinstance(account, Token22MintAccount):
        rows = _mint_rows(account.mint.base)
        for i, tag in enumerate(account.extensions):
            rows[f"Extension {i}"] = extension_name(tag)
        cn.print(kv_table(f"Token-2022 mint {account.key}", rows))
        return

    if isinstance(account, OtherAccount):
        cn.print(kv_table(f"Account {account.key}", {
            "Owner": program_label(account.owner),
            "Balance": f"◎{display_sol(account.lamports)}",
            "Executable": account.executable,
            "Data": base64.b64encode(account.data).decode("ascii") or "(empty)",
        }))
        return

    raise TypeError(f"Cannot render {type(account).__name__}")


def _balance_change(pre: Optional[int], post: Optional[int]) -> Text:
    if post is None:
        return Text("")
    style = ""
    if pre is not None and post > pre:
        style = "green"
    elif pre is not None and post < pre:
        style = "red"
    return Text(display_sol(post), style=style)


def render_transaction(transaction: ParsedTransaction, console: Optional[Console] = None) -> None:
    """Print a resolved transaction with its accounts and logs."""
    cn = _console(console)
    meta = transaction.meta

    result = Text("SUCCESS", style="bold green") if meta.succeeded else Text("FAILURE", style="bold red")
    timestamp = datetime.fromtimestamp(transaction.block_time, tz=timezone.utc)
    summary: Dict[str, Any] = {
        "Result": result,
        "Slot": format_integer(transaction.slot),
        "Timestamp": timestamp.strftime("%Y-%m-%d %H:%M:%S UTC"),
        "Fee": format_fee(meta.fee),
        "Version": format_version(transaction.version),
        "Recent blockhash": transaction.recent_blockhash,
    }
    if meta.err is not None:
        summary["Error"] = meta.err
    if transaction.compute_units_consumed is not None:
        summary["Compute units"] = format_integer(transaction.compute_units_consumed)
    cn.print(kv_table("Transaction", summary))

    rows = []
    for i, account in enumerate(transaction.accounts):
        pre = meta.pre_balances[i] if i < len(meta.pre_balances) else None
        post = meta.post_balances[i] if i < len(meta.post_balances) else None
        flags = "".join((
            "s" if account.is_signer else "-",
            "w" if account.is_writable else "-",
        ))
        rows.append((
            i,
            account.pubkey,
            flags,
            display_sol(pre) if pre is not None else "",
            _balance_change(pre, post),
        ))
    cn.print(rows_table("Accounts", ("#", "Address", "Flags", "Pre ◎", "Post ◎"), rows))

    if meta.log_messages:
        cn.print(rows_table("Program logs", ("Log",), ((line,) for line in meta.log_messages)))


def render_block(block: ParsedBlock, console: Optional[Console] = None) -> None:
    """Print a block summary and, when available, its program ranking."""
    cn = _console(console)
    cn.print(kv_table(f"Block {block.slot}", {
        "Slot": format_integer(block.slot),
        "Parent slot": format_integer(block.parent_slot),
        "Leader": block.leader,
        "Rewards": format_rewards(block.rewards, block.rewards_sub),
        "Blockhash": block.blockhash,
        "Transactions": (
            f"{block.nonvote_transactions} nonvote + {block.vote_transactions} vote"
            f" = {block.total_transactions} total"
        ),
        "Compute units": format_integer(block.compute_units),
    }))

    ranked = block.ranked_invocations()
    if ranked:
        cn.print(rows_table(
            "Program invocations",
            ("Program", "Invocations"),
            ((program_label(program), format_integer(count)) for program, count in ranked),
        ))


def render_scan_result(result: BlockScanResult, console: Optional[Console] = None) -> None:
    cn = _console(console)
    if result.block is not None:
        render_block(result.block, cn)
    else:
        cn.print(Text(f"Slot {result.slot}: {result.error}", style="yellow"))
