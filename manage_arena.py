"""CLI tool for driving a running PokeArena Server.

Connects to the server's REST API to enter combatants, advance the arena
and run inspections. The server must be running for this tool to work.

Usage:
    python manage_arena.py register --species Pikachu
    python manage_arena.py register --config my_pokemon.json --x 100 --y 200
    python manage_arena.py roster
    python manage_arena.py target --id 3 --x 485 --y 272
    python manage_arena.py tick --count 50
    python manage_arena.py inspect
    python manage_arena.py battles

Environment variables:
    POKEARENA_URL    - Server URL (default: http://127.0.0.1:8000)
    ADMIN_SECRET     - Admin secret for the server (default: change-me-in-production)
"""

import argparse
import json
import os
import sys

import httpx

DEFAULT_URL = os.environ.get("POKEARENA_URL", "http://127.0.0.1:8000")
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "change-me-in-production")


def _request(method: str, url: str, **kwargs) -> httpx.Response:
    """Make an HTTP request with admin secret, handling connection errors."""
    kwargs.setdefault("headers", {})["X-Admin-Secret"] = ADMIN_SECRET
    kwargs.setdefault("timeout", 30.0)
    try:
        return httpx.request(method, url, **kwargs)
    except httpx.ConnectError:
        print(f"Error: Could not connect to server at {url}", file=sys.stderr)
        print("Is the server running?", file=sys.stderr)
        sys.exit(1)


def _handle_error(resp: httpx.Response) -> None:
    """Handle common error status codes."""
    if resp.status_code == 403:
        print("Error: Invalid admin secret", file=sys.stderr)
        print("Set ADMIN_SECRET env var to match the server's config", file=sys.stderr)
        sys.exit(1)
    elif resp.status_code == 400:
        detail = resp.json().get("detail", "Bad request")
        if isinstance(detail, dict):
            detail = f"{detail.get('kind')}: {detail.get('message')}"
        print(f"Rejected: {detail}", file=sys.stderr)
        sys.exit(1)
    elif resp.status_code in (404, 409):
        detail = resp.json().get("detail", "Error")
        print(f"Error: {detail}", file=sys.stderr)
        sys.exit(1)
    elif resp.status_code != 200:
        print(f"Error: {resp.status_code} {resp.text}", file=sys.stderr)
        sys.exit(1)


def register(url: str, species: str | None, config_path: str | None,
             x: int | None, y: int | None) -> None:
    """Enter a combatant from the species catalogue or a JSON config file."""
    body: dict = {}
    if config_path:
        with open(config_path) as f:
            body["custom"] = json.load(f)
    else:
        body["species"] = species
    if x is not None and y is not None:
        body["position"] = [x, y]
    resp = _request("POST", f"{url}/arena/combatants", json=body)
    _handle_error(resp)
    data = resp.json()
    print(data["message"])
    print(f"ID: {data['combatant_id']}")


def show_roster(url: str) -> None:
    """List every roaming combatant."""
    resp = _request("GET", f"{url}/arena/roster")
    _handle_error(resp)
    roster = resp.json()
    if not roster:
        print("The arena is empty.")
        return
    print(f"{'ID':<6} {'NAME':<16} {'TYPE':<10} {'LV':>3} {'HP':>9} {'WINS':>5}  POSITION")
    print("-" * 66)
    for c in roster:
        hp = f"{c['current_hp']}/{c['max_hp']}"
        pos = f"({c['position'][0]}, {c['position'][1]})"
        print(f"{c['id']:<6} {c['name']:<16} {c['type']:<10} {c['level']:>3} {hp:>9} {c['wins']:>5}  {pos}")


def set_target(url: str, combatant_id: str, x: int, y: int) -> None:
    """Send a combatant walking toward a point."""
    resp = _request("POST", f"{url}/arena/combatants/{combatant_id}/target", json={"x": x, "y": y})
    _handle_error(resp)
    print(f"{combatant_id} is heading to ({x}, {y})")


def advance(url: str, count: int) -> None:
    """Advance the arena and print any battles."""
    resp = _request("POST", f"{url}/arena/tick", params={"count": count})
    _handle_error(resp)
    reports = resp.json()
    for report in reports:
        for cid in report["culled"]:
            print(f"[tick {report['tick']}] {cid} wandered out of the arena")
        battle = report.get("battle")
        if battle is None:
            continue
        if battle["success"]:
            print(
                f"[tick {report['tick']}] {battle['winner']['name']} defeated "
                f"{battle['loser']['name']} in {battle['rounds']} rounds "
                f"(+{battle['exp_gained']} exp)"
            )
        else:
            print(f"[tick {report['tick']}] battle aborted: {battle['error']}")
    print(f"Advanced {len(reports)} tick(s).")


def inspect(url: str) -> None:
    """Run an inspection sweep and print the verdicts."""
    resp = _request("POST", f"{url}/admin/inspect")
    _handle_error(resp)
    data = resp.json()
    for report in data["reports"]:
        verdict = "PASS" if report["passed"] else f"DISQUALIFIED: {report['reason']}"
        print(f"{report['combatant_id']:<6} {report['name']:<16} {verdict}")
    print(f"Inspected {data['inspected']}, disqualified {len(data['disqualified'])}.")


def list_battles(url: str) -> None:
    """Print the battle history."""
    resp = _request("GET", f"{url}/arena/battles")
    _handle_error(resp)
    battles = resp.json()
    if not battles:
        print("No battles yet.")
        return
    for i, battle in enumerate(battles, start=1):
        if battle["success"]:
            print(
                f"#{i}: {battle['winner']['name']} beat {battle['loser']['name']} "
                f"({battle['rounds']} rounds, +{battle['exp_gained']} exp"
                f"{', level up' if battle['leveled_up'] else ''})"
            )
        else:
            print(f"#{i}: aborted ({battle['error']})")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Drive a running PokeArena Server",
    )

    url_kwargs = dict(
        default=DEFAULT_URL,
        help=f"Server URL (default: {DEFAULT_URL}, or set POKEARENA_URL env var)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    register_parser = subparsers.add_parser("register", help="Enter a combatant")
    source = register_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--species", help="Catalogue species name")
    source.add_argument("--config", help="Path to a JSON combatant config")
    register_parser.add_argument("--x", type=int, help="Starting x position")
    register_parser.add_argument("--y", type=int, help="Starting y position")
    register_parser.add_argument("--url", **url_kwargs)

    roster_parser = subparsers.add_parser("roster", help="List roaming combatants")
    roster_parser.add_argument("--url", **url_kwargs)

    target_parser = subparsers.add_parser("target", help="Set a combatant's roam target")
    target_parser.add_argument("--id", required=True, help="Combatant id")
    target_parser.add_argument("--x", type=int, required=True)
    target_parser.add_argument("--y", type=int, required=True)
    target_parser.add_argument("--url", **url_kwargs)

    tick_parser = subparsers.add_parser("tick", help="Advance the arena")
    tick_parser.add_argument("--count", type=int, default=1, help="Number of ticks")
    tick_parser.add_argument("--url", **url_kwargs)

    inspect_parser = subparsers.add_parser("inspect", help="Run an Officer Jenny inspection")
    inspect_parser.add_argument("--url", **url_kwargs)

    battles_parser = subparsers.add_parser("battles", help="Show battle history")
    battles_parser.add_argument("--url", **url_kwargs)

    args = parser.parse_args()

    if args.command == "register":
        register(args.url, args.species, args.config, args.x, args.y)
    elif args.command == "roster":
        show_roster(args.url)
    elif args.command == "target":
        set_target(args.url, args.id, args.x, args.y)
    elif args.command == "tick":
        advance(args.url, args.count)
    elif args.command == "inspect":
        inspect(args.url)
    elif args.command == "battles":
        list_battles(args.url)


if __name__ == "__main__":
    main()
