import asyncio

from neutralipc import Connection, Template, load_options


async def main() -> None:
    options = load_options()

    if not await Connection(options).ping():
        print(f"No Neutral IPC server at {options.host}:{options.port}")
        return

    template = Template.from_source(
        "Hello {:;text:}!",
        {"data": {"text": "World"}},
        options=options,
    )
    print(await template.render())
    print(template.status_code, template.status_text)


asyncio.run(main())
