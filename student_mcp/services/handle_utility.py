"""Utility Handlers — echo and add, for checking a client connection end to end."""

from student_mcp.schemas.utility import AddInput, EchoInput


class UtilityHandlers:

    async def echo(self, args: EchoInput) -> str:
        return f"Echo: {args.message}"

    async def add(self, args: AddInput) -> str:
        total = args.a + args.b
        return f"The sum of {_fmt(args.a)} and {_fmt(args.b)} is {_fmt(total)}."


def _fmt(number: float) -> str:
    # 2.0 -> "2", 2.5 -> "2.5"
    return str(int(number)) if float(number).is_integer() else str(number)
