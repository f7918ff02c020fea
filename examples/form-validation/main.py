"""
Form Validation Example

Waits until every validation message in a small form tree has been
cleared, then "submits" the form.

Run with: python examples/form-validation/main.py
"""

import asyncio
import logging

from msgledger import EventNode, Message, configure_logging, create_ledger


async def main():
    configure_logging()
    log = logging.getLogger("msgledger.examples")

    form = EventNode("signup")
    email = EventNode("email", parent=form)
    password = EventNode("password", parent=form)

    ledger = create_ledger()
    ledger.init(form)
    ledger.count("blocking", lambda m: m.blocking)

    email.set_message(Message(key="required", type="validation", blocking=True))
    password.set_message(Message(key="length", type="validation", blocking=True))
    password.set_message(Message(key="hint", type="ui", value="Use 12+ characters"))
    log.info("Blocking messages: %d", ledger.value("blocking"))

    async def user_fixes_fields():
        await asyncio.sleep(0.1)
        email.remove_message("required")
        await asyncio.sleep(0.1)
        password.remove_message("length")

    fixer = asyncio.create_task(user_fixes_fields())
    await ledger.settled("blocking").wait(timeout=5)
    await fixer
    log.info("Form settled, submitting %s", form.name)


if __name__ == "__main__":
    asyncio.run(main())
