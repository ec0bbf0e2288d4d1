"""
ターミナル入力の読み取り（1本の読み取りスレッド + asyncio.Queue）

【初心者向け】
- input() はブロックするので、別スレッドで標準入力を読み続ける
- 読んだ行はキューに入れ、ask() はキューから1行取り出すだけ
- 時間切れで ask() が打ち切られても、その後に打った行はキューに残り、
  次の ask()（例: 再送信の確認）が受け取る
"""
import asyncio
import logging
import sys
import threading
from typing import Callable, Optional, TextIO

# ロガー設定
logger = logging.getLogger(__name__)


def _write_prompt(text: str) -> None:
    print(text, end="", flush=True)


class ConsoleReader:
    """標準入力を1行ずつ ask() に渡すリーダー"""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        write: Callable[[str], None] = _write_prompt,
    ):
        self.stream = stream if stream is not None else sys.stdin
        self.write = write
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._eof = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """読み取りスレッドを起動する（実行中のイベントループから呼ぶ。2回目以降は何もしない）"""
        if self._thread is not None:
            return
        loop = asyncio.get_running_loop()
        self._thread = threading.Thread(target=self._worker, args=(loop,), daemon=True)
        self._thread.start()

    def feed(self, line: str) -> None:
        """1行をキューに入れる（イベントループのスレッドから呼ぶ）"""
        self._queue.put_nowait(line)

    def close(self) -> None:
        """入力の終わり。待っている ask() と以降の ask() には空行を返す"""
        self._eof = True
        self._queue.put_nowait("")

    async def ask(self, prompt: str) -> str:
        """プロンプトを表示して1行返す（改行は取り除く）"""
        self.write(prompt)
        if self._eof and self._queue.empty():
            return ""
        return await self._queue.get()

    def _worker(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            for line in self.stream:
                loop.call_soon_threadsafe(self.feed, line.rstrip("\r\n"))
            loop.call_soon_threadsafe(self.close)
        except RuntimeError:
            # ループ終了後の入力は捨てる
            logger.debug("イベントループ終了後の入力を破棄しました")
