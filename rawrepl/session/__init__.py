# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

"""
Raw REPL protocol
+++++++++++++++++

The MicroPython REPL has a machine-oriented mode called the *raw REPL*. In this mode the board accepts a whole
code submission terminated by a single control character, executes it, and reports the standard output
and the standard error separated by control characters::

    host  -> board:  \\r \\x03 \\x03            interrupt whatever is running
    host  -> board:  \\x01                    enter the raw REPL mode
    board -> host:   raw REPL; CTRL-B to exit\\r\\n>
    host  -> board:  <code> \\x04             submit and execute
    board -> host:   OK <stdout> \\x04 <stderr> \\x04 >

There is no framing other than these textual sentinels, so the driver scans the incoming stream byte by byte
(see :func:`read_until`) and treats any deviation from the expected sequence as a loss of synchronization,
which it recovers from by repeating the handshake.

Only one operation can drive the transport at a time; this is enforced by :class:`SingleFlightLock`.


Usage
+++++

..  code-block:: python

    import asyncio
    from rawrepl.session import Session
    from rawrepl.transport.serial import SerialTransport

    async def main() -> None:
        async with Session(SerialTransport("/dev/ttyUSB0", baudrate=115200)) as session:
            await session.initialize()
            result = await session.execute("print(2 + 2)")
            print(result.output)                        # 4
            async for chunk in session.execute_interactive("for i in range(3): print(i)"):
                print(chunk.decode(), end="")

    asyncio.run(main())
"""

from ._session import Session as Session
from ._session import SessionState as SessionState
from ._session import ExecutionResult as ExecutionResult
from ._session import INTERRUPT as INTERRUPT
from ._session import ENTER_RAW_MODE as ENTER_RAW_MODE
from ._session import RAW_MODE_BANNER as RAW_MODE_BANNER
from ._session import PROMPT as PROMPT
from ._session import ACKNOWLEDGMENT as ACKNOWLEDGMENT
from ._session import END_OF_TRANSMISSION as END_OF_TRANSMISSION
from ._session import DEFAULT_HANDSHAKE_BUDGET as DEFAULT_HANDSHAKE_BUDGET

from ._scanner import read_until as read_until
from ._scanner import read_until_iter as read_until_iter
from ._scanner import DEFAULT_SCAN_PERIOD as DEFAULT_SCAN_PERIOD

from ._lock import SingleFlightLock as SingleFlightLock

from ._error import HandshakeError as HandshakeError
from ._error import RemoteExecutionError as RemoteExecutionError
