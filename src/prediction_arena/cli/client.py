"""CLI to exercise the prediction arena HTTP API.

Usage:
  prediction-arena-client health
  prediction-arena-client tournaments list --category crypto
  prediction-arena-client auth login alice@test.com --password 'S3cret!pw'
  prediction-arena-client --token $TOKEN enter 3 "Keep Same"
  prediction-arena-client --token $TOKEN claim
"""
import argparse
import json
import os
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _show(r: httpx.Response) -> int:
    try:
        body = r.json()
    except ValueError:
        body = r.text
    print_json(body)
    return 0 if r.is_success else 1


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/health"))


def cmd_tournaments_list(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"category": args.category, "page": args.page, "pageSize": args.page_size}
    r = client.get("/api/tournaments", params=params)
    if r.is_success:
        total = r.headers.get("X-Total-Count", "?")
        print(f"Page {args.page}: {len(r.json())} of {total} tournaments", file=sys.stderr)
    return _show(r)


def cmd_tournaments_get(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/api/tournaments/{args.tournament_id}"))


def cmd_auth_register(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {
        "email": args.email,
        "wallet_address": args.wallet,
        "username": args.username,
        "password": args.password,
    }
    return _show(client.post("/api/auth/register", json=body))


def cmd_auth_login(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"identifier": args.identifier, "password": args.password}
    return _show(client.post("/api/auth/login", json=body))


def cmd_enter(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post(
        f"/api/tournaments/{args.tournament_id}/enter",
        json={"prediction": args.prediction},
    )
    return _show(r)


def cmd_claim(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.post("/api/user/claim-free-points"))


def cmd_stats(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/user/stats"))


def cmd_resolve(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post(
        f"/api/admin/tournaments/{args.tournament_id}/resolve",
        json={"correct_answer": args.correct_answer},
    )
    return _show(r)


def cmd_sweep(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.post("/api/admin/lifecycle/sweep"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exercise the prediction arena API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--token",
        default=os.getenv("ARENA_TOKEN"),
        help="Bearer token (default: $ARENA_TOKEN)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    p = subparsers.add_parser("health", help="GET /api/health")
    p.set_defaults(func=cmd_health)

    tournaments = subparsers.add_parser("tournaments", help="Tournament routes")
    t_sub = tournaments.add_subparsers(dest="tournaments_cmd", required=True)
    p = t_sub.add_parser("list", help="GET /api/tournaments")
    p.add_argument("--category", default="all")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--page-size", type=int, default=20)
    p.set_defaults(func=cmd_tournaments_list)
    p = t_sub.add_parser("get", help="GET /api/tournaments/{id}")
    p.add_argument("tournament_id", type=int)
    p.set_defaults(func=cmd_tournaments_get)

    auth = subparsers.add_parser("auth", help="Auth routes")
    a_sub = auth.add_subparsers(dest="auth_cmd", required=True)
    p = a_sub.add_parser("register", help="POST /api/auth/register")
    p.add_argument("username")
    p.add_argument("--email")
    p.add_argument("--wallet")
    p.add_argument("--password")
    p.set_defaults(func=cmd_auth_register)
    p = a_sub.add_parser("login", help="POST /api/auth/login")
    p.add_argument("identifier", help="Username or email")
    p.add_argument("--password", required=True)
    p.set_defaults(func=cmd_auth_login)

    p = subparsers.add_parser("enter", help="POST /api/tournaments/{id}/enter")
    p.add_argument("tournament_id", type=int)
    p.add_argument("prediction")
    p.set_defaults(func=cmd_enter)

    p = subparsers.add_parser("claim", help="POST /api/user/claim-free-points")
    p.set_defaults(func=cmd_claim)
    p = subparsers.add_parser("stats", help="GET /api/user/stats")
    p.set_defaults(func=cmd_stats)

    p = subparsers.add_parser("resolve", help="POST /api/admin/tournaments/{id}/resolve")
    p.add_argument("tournament_id", type=int)
    p.add_argument("correct_answer")
    p.set_defaults(func=cmd_resolve)
    p = subparsers.add_parser("sweep", help="POST /api/admin/lifecycle/sweep")
    p.set_defaults(func=cmd_sweep)
    return parser


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    args = build_parser().parse_args(argv)
    headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}
    try:
        with httpx.Client(
            base_url=args.base_url,
            timeout=args.timeout,
            headers=headers,
            transport=transport,
        ) as client:
            return args.func(client, args)
    except httpx.HTTPError as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
