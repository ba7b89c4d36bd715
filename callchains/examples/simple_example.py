"""
Simple example demonstrating the callchains pattern.
"""

import callchains
from callchains import now, start


# Some callback-style functions, the kind a Chain is meant to sequence
def load_greeting(name, callback):
    if not name:
        callback(ValueError("name is missing"))
        return
    callback(None, f"Hello, {name}!")


def add_timestamp(greeting, callback):
    import datetime
    callback(greeting, datetime.datetime.now().isoformat())


# Step handlers
def format_message(ctx, greeting, timestamp):
    message = f"{greeting} (at {timestamp})"
    print(f"Step: Formatted message")
    return message


def announce(ctx, message):
    print(f"Step: {message}")
    return message


def report_failure(ctx, error):
    print(f"Failed: {error}")


def main():
    print("=" * 60)
    print("callchains Simple Example")
    print("=" * 60)
    print()

    # Build the chain: each step waits for the previous callback to complete
    chain = (start()
        .n_call(load_greeting, "World")
        .chain(lambda ctx, greeting: ctx.a_call(add_timestamp, greeting))
        .chain(format_message)
        .chain(announce)
        .fail(report_failure))

    print(f"Queued: {chain!r}")
    print()

    # Deferred steps run on the next tick
    callchains.flush()

    print()
    print(f"Final value: {chain.value}")
    print()

    # Failure path
    print("Running with a missing name:")
    failing = now().n_call(load_greeting, "").chain(announce).fail(report_failure)
    callchains.flush()
    print(f"Errors seen: {failing.errors}")
    print()

    # Joining several chains
    print("Joining three chains:")
    names = ["Ada", "Grace", "Barbara"]
    joined = callchains.each(names, lambda name: callchains.n_call(load_greeting, name))
    joined.spread(lambda ctx, *greetings: print("\n".join(f"  {g}" for g in greetings)))
    callchains.flush()

    print()
    print("=" * 60)


if __name__ == "__main__":
    main()
