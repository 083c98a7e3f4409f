"""
Storefront CLI - Command-line interface for the engine.

Usage:
    storefront demo [--cache-dir DIR]          Walk through login, catalog and checkout
    storefront cache show [--cache-dir DIR]    List cached products
    storefront cache clear [--cache-dir DIR]   Remove every cached product
"""

import argparse
import asyncio
import sys
from pathlib import Path

from .config import Settings
from .utils.logging import configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Storefront - Offline-first catalog and cart engine",
        prog="storefront",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run a scripted session")
    demo_parser.add_argument("--cache-dir", help="Persist the product cache here")
    demo_parser.add_argument("--username", default="mor_2314", help="Login username")
    demo_parser.add_argument("--password", default="83r5^_", help="Login password")

    # Cache commands
    cache_parser = subparsers.add_parser("cache", help="Inspect the product cache")
    cache_parser.add_argument("action", choices=["show", "clear"])
    cache_parser.add_argument("--cache-dir", help="Cache directory (default ~/.storefront/cache)")

    args = parser.parse_args(argv)

    if args.command == "demo":
        configure_logging()
        asyncio.run(cmd_demo(args))
    elif args.command == "cache":
        asyncio.run(cmd_cache(args))
    else:
        parser.print_help()
        sys.exit(1)


async def cmd_demo(args):
    """Log in, load the catalog, fill the cart and check out."""
    from .features.login import LoginAction
    from .features.store import StoreAction
    from .session import SessionManager

    settings = Settings.from_env()
    if args.cache_dir:
        settings.cache_dir = Path(args.cache_dir).expanduser()
    settings.checkout_delay = min(settings.checkout_delay, 0.5)

    manager = SessionManager(settings)
    session = manager.create_session()
    session.start_monitoring()
    print(f"Session created: {session.session_id}")

    try:
        login = session.login
        login.send(LoginAction.username_changed(args.username))
        login.send(LoginAction.password_changed(args.password))
        login.send(LoginAction.login_button_tapped())
        await login.settle()

        if not login.state.success:
            print(f"Login failed: {login.state.error_message}")
            sys.exit(1)
        print(f"Logged in as {args.username}")

        store = session.store
        store.send(StoreAction.on_appear())
        await store.settle()

        state = store.state
        print(f"\nCatalog ({len(state.products)} products):")
        for product in state.products:
            print(f"  [{product.id:>3}] {product.title} - ${product.price}")
        print(f"Categories: {', '.join(state.unique_categories)}")

        for product in state.products[:2]:
            store.send(StoreAction.add_to_cart(product.id))
        if state.products:
            store.send(StoreAction.add_to_cart(state.products[0].id))
        await store.drain()

        state = store.state
        print("\nCart:")
        for line in state.cart_lines:
            print(f"  {line.quantity} x {line.product.title} = ${line.subtotal}")
        print(f"Total: ${state.total_price}")

        store.send(StoreAction.complete_order())
        await store.drain()
        print(f"\nOrder placed: {store.state.show_order_success}")
        await store.settle()
        print(f"Cart cleared: {store.state.cart.is_empty}")
    finally:
        await manager.shutdown()


async def cmd_cache(args):
    """Show or clear the JSON product cache."""
    from .gateways.cache import JSONFileCacheGateway
    from .result import Err

    cache = JSONFileCacheGateway(args.cache_dir)

    if args.action == "clear":
        result = await cache.clear()
        if isinstance(result, Err):
            print(f"Error: {result.error}")
            sys.exit(1)
        print(f"Cleared {cache.path}")
        return

    result = await cache.read_all()
    if isinstance(result, Err):
        print(f"Error: {result.error}")
        sys.exit(1)

    products = result.value
    print(f"{cache.path}: {len(products)} product(s)")
    for product in products:
        print(f"  [{product.id:>3}] {product.title} ({product.category}) - ${product.price}")


if __name__ == "__main__":
    main()
