"""CLI for the eth_reserve HTTP API: trigger cron jobs and manage purchases.

Usage:
  reserve-cli health
  reserve-cli snapshots                      # uses $CRON_SECRET
  reserve-cli wallet                         # uses $CRON_SECRET
  reserve-cli purchase add 3 10 20000 --type buy   # uses $ADMIN_TOKEN
  reserve-cli purchase list --company-id 3
"""
import argparse
import json
import os
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _bearer(token: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_snapshots(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/cron/update-snapshots", headers=_bearer(args.cron_secret))
    r.raise_for_status()
    data = r.json()
    aggregate = data.get("aggregate") or {}
    print(
        f"{data['snapshot_date']}: {len(data['companies'])} companies reconciled, "
        f"{len(data['failed_company_ids'])} failed, {len(data['alerts'])} alerts"
    )
    if aggregate:
        print(
            f"Total reserve {aggregate['total_reserve']:.4f} ETH "
            f"(${aggregate['total_reserve_usd']:,.0f}) across {aggregate['total_companies']} companies"
        )
    if args.verbose:
        print_json(data)
    return 0


def cmd_wallet(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/cron/update-company-wallet", headers=_bearer(args.cron_secret))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_purchase_add(client: httpx.Client, args: argparse.Namespace) -> int:
    payload = {
        "company_id": args.company_id,
        "amount": args.amount,
        "total_cost": args.total_cost,
        "type": args.type,
    }
    r = client.post("/purchases", json=payload, headers=_bearer(args.admin_token))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_purchase_list(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"company_id": args.company_id} if args.company_id is not None else {}
    r = client.get("/purchases", params=params, headers=_bearer(args.admin_token))
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} purchases")
    print_json(data[: args.head] if args.head else data)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Trigger eth_reserve jobs and manage the purchase ledger over HTTP.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("RESERVE_API_URL", "http://localhost:8001"),
        help="API base URL (default: $RESERVE_API_URL or http://localhost:8001)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Request timeout in seconds (default: 120; the daily run fans out to providers)",
    )
    parser.add_argument("--cron-secret", default=os.getenv("CRON_SECRET"), help=argparse.SUPPRESS)
    parser.add_argument("--admin-token", default=os.getenv("ADMIN_TOKEN"), help=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET / health check")

    p = subparsers.add_parser("snapshots", help="POST /cron/update-snapshots")
    p.add_argument("-v", "--verbose", action="store_true", help="Print the full run summary")

    subparsers.add_parser("wallet", help="POST /cron/update-company-wallet")

    purchase = subparsers.add_parser("purchase", help="Purchase ledger (/purchases)")
    purchase_sub = purchase.add_subparsers(dest="purchase_cmd", required=True)
    p = purchase_sub.add_parser("add", help="POST /purchases")
    p.add_argument("company_id", type=int, help="Company id")
    p.add_argument("amount", type=float, help="ETH amount")
    p.add_argument("total_cost", type=float, help="Total cost in USD")
    p.add_argument("--type", choices=["buy", "yield"], default="buy", help="Entry type (default: buy)")
    p = purchase_sub.add_parser("list", help="GET /purchases")
    p.add_argument("--company-id", type=int, default=None, help="Filter by company")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    handlers = {
        "health": cmd_health,
        "snapshots": cmd_snapshots,
        "wallet": cmd_wallet,
        "purchase": {"add": cmd_purchase_add, "list": cmd_purchase_list},
    }
    handler = handlers[args.command]
    if isinstance(handler, dict):
        handler = handler[args.purchase_cmd]

    try:
        with httpx.Client(base_url=args.base_url.rstrip("/"), timeout=args.timeout) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
