"""
Order processing example demonstrating a callback-driven business workflow with callchains.
"""

import callchains
from callchains import TickQueue, ChainConfig


# A tiny fake "I/O layer": callbacks fire on a later tick, like real network calls would
io_loop = TickQueue()


def check_stock(item, callback):
    """Pretend to ask the warehouse service whether `item` is in stock."""
    def respond():
        if item['quantity'] > 10:
            callback(LookupError(f"Not enough stock for {item['name']}"))
        else:
            callback(None, item['name'], True)
    io_loop.defer(respond)


def charge_card(customer_id, amount, callback):
    """Pretend to charge the customer's card; replies with a transaction id."""
    io_loop.defer(callback, None, f"txn_{customer_id}_{int(amount * 100)}")


# Steps
def validate_order(ctx, order):
    if not order.get('items'):
        raise ValueError("Order has no items")
    if not order.get('customer_id'):
        raise ValueError("Customer ID is missing")

    print(f"✓ Order validated for customer {order['customer_id']}")
    return order


def reserve_inventory(ctx, order):
    checks = [callchains.n_call(check_stock, item) for item in order['items']]
    for item in order['items']:
        print(f"  Checking inventory for {item['name']}...")

    def all_reserved(ctx, results):
        print(f"✓ Inventory reserved for {len(results)} items")
        return order

    return callchains.all(checks).chain(all_reserved)


def calculate_totals(ctx, order):
    subtotal = sum(item['price'] * item['quantity'] for item in order['items'])
    tax = subtotal * 0.08  # 8% tax
    total = subtotal + tax

    print(f"✓ Calculated totals - Subtotal: ${subtotal:.2f}, Tax: ${tax:.2f}, Total: ${total:.2f}")
    return order, total


def process_payment(ctx, order, total):
    print(f"  Charging ${total:.2f}...")
    ctx.n_call(charge_card, order['customer_id'], total)


def confirm(ctx, transaction_id=None):
    print(f"✓ Payment processed (transaction: {transaction_id})")
    return transaction_id


def order_failed(ctx, error):
    print(f"✗ Order failed: {error}")
    if ctx.details:
        print(f"  Per-item errors: {ctx.details[0]}")


def process(order):
    config = ChainConfig(immediate=True)
    return (callchains.start(order, config=config)
        .chain(validate_order)
        .chain(reserve_inventory)
        .chain(calculate_totals)
        .chain(process_payment)
        .chain(confirm)
        .fail(order_failed))


def run_until_done():
    # Alternate between chain ticks and fake I/O until both are idle
    while callchains.flush() + io_loop.run():
        pass


def main():
    print("=" * 60)
    print("callchains Order Processing Example")
    print("=" * 60)
    print()

    good_order = {
        'customer_id': 'CUST-001',
        'items': [
            {'name': 'Widget', 'price': 9.99, 'quantity': 2},
            {'name': 'Gadget', 'price': 24.50, 'quantity': 1},
        ],
    }

    print("Processing a valid order:")
    chain = process(good_order)
    run_until_done()
    print(f"Result: {chain.value}")
    print()

    bad_order = {
        'customer_id': 'CUST-002',
        'items': [
            {'name': 'Widget', 'price': 9.99, 'quantity': 50},
            {'name': 'Gadget', 'price': 24.50, 'quantity': 1},
        ],
    }

    print("Processing an order that cannot be filled:")
    chain = process(bad_order)
    run_until_done()
    print(f"Errors recorded: {chain.errors}")
    print()

    print("=" * 60)


if __name__ == "__main__":
    main()
