import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from askdesk.app_config import load_json_config, parse_app_config, resolve_runtime_env
from askdesk.bootstrap import bootstrap_runtime


async def main() -> None:
    load_dotenv()

    app = parse_app_config(load_json_config())
    env = resolve_runtime_env(app.answer_backend)

    try:
        runtime = bootstrap_runtime(app, env)
    except ValueError as ex:
        logger.error(str(ex))
        sys.exit(1)

    workspace = runtime.workspace
    print("askdesk (type 'exit' to quit, '/help' for commands)")
    print(f"User: {workspace.user_id}")
    print(f"Answer backend: {app.answer_backend}")
    print(
        f"Sessions: {len(workspace.archive.sessions)} | Folders: {len(workspace.folders.folders)} | "
        f"Open conversation: {len(workspace.conversation.messages)} message(s)"
    )
    if runtime.log_descriptions:
        print(f"Logging: {', '.join(runtime.log_descriptions)}")
    print()

    try:
        while True:
            try:
                user_input = input("you> ")
            except (EOFError, KeyboardInterrupt):
                break

            trimmed = user_input.strip()
            if trimmed in ("exit", "quit"):
                break
            if not trimmed and workspace.conversation.pending_attachment is None:
                continue

            try:
                await runtime.shell.handle(user_input)
                print()
            except Exception as ex:
                logger.error(f"Unhandled error: {ex}")
    finally:
        runtime.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
