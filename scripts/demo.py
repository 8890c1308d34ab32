#!/usr/bin/env python3
"""
Interactive demo for the storefront voice assistant.

Typed lines stand in for finalized speech utterances and run through the full
pipeline (listening loop, classifier, interpreters) against in-memory state.

Usage:
    python scripts/demo.py                      # Default model from config
    python scripts/demo.py --model gpt-4o       # Override classifier model
    python scripts/demo.py --page payment       # Start on the payment page
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.core.capture import QueueCaptureSource
from storefront.core.config import get_config
from storefront.core.events import PROFILE_UPDATED, STATUS, Event
from storefront.core.listener import ListeningLoop
from storefront.core.state import AssistantState
from storefront.core.stores import InMemoryNavigator, Page
from voice_agent import ClassifierGateway, InterpreterContext, create_dispatcher
from voice_agent.interpreters.filters import describe_selection


def display_state(context: InterpreterContext) -> None:
    """Display filters and page after a command."""
    print(f"  Page:    {context.navigator.path}")
    print(f"  Filters: {describe_selection(context.filters.snapshot())}")


async def run_demo(args) -> None:
    config = get_config()
    if args.model:
        config.model = args.model

    navigator = InMemoryNavigator(start=Page(args.page))
    context = InterpreterContext.in_memory(
        gateway=ClassifierGateway(model=config.model),
        navigator=navigator,
        config=config,
    )
    state = AssistantState(log_size=config.action_log_size)
    capture = QueueCaptureSource()
    listener = ListeningLoop(create_dispatcher(context, state), capture, state, events=context.events, config=config)

    processed = asyncio.Event()

    def on_status(event: Event) -> None:
        marker = "OK " if event.data["success"] else "?? "
        print(f"\n{marker} {event.data['message']}")
        processed.set()

    def on_profile(event: Event) -> None:
        print(f"  Profile: {event.data['summary']} ({', '.join(event.data['changed_fields'])})")

    context.events.subscribe(STATUS, on_status)
    context.events.subscribe(PROFILE_UPDATED, on_profile)

    task = asyncio.create_task(listener.run())
    try:
        while True:
            user_input = (await asyncio.to_thread(input, "\nSay: ")).strip()
            if not user_input:
                continue
            if user_input.lower() == 'quit':
                print("Goodbye!")
                break
            processed.clear()
            capture.push(user_input)
            await processed.wait()
            display_state(context)
            print(f"  Failures in a row: {state.recovery_counter}")
    finally:
        await listener.drain(task, timeout=config.request_timeout)


def main():
    parser = argparse.ArgumentParser(description='Interactive storefront voice assistant demo')
    parser.add_argument('--model', type=str, default=None,
                        help='Classifier model (defaults to config / OPENAI_MODEL)')
    parser.add_argument('--page', type=str, default='home', choices=[p.value for p in Page],
                        help='Page the assistant starts on')
    args = parser.parse_args()

    print("=" * 60)
    print("STOREFRONT VOICE ASSISTANT - Interactive Demo")
    print("=" * 60)
    print("Type what you would say. Type 'quit' to exit.")
    print("=" * 60)

    try:
        asyncio.run(run_demo(args))
    except (KeyboardInterrupt, EOFError):
        print("\n\nGoodbye!")


if __name__ == '__main__':
    main()
