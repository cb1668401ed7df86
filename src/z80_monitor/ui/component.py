# z80_monitor/ui/component.py
"""
コンポーネントのライフサイクル。

ホストは create(props, link) → props_changed / handle_message → render の順に呼び出します。
props_changed と handle_message は再描画が必要なら True を返します。
"""
from typing import Any, Callable, Optional

from .vdom import Node

Link = Callable[[Any], None]


class Component:
    def __init__(self, props: Any = None, link: Optional[Link] = None):
        self.props = props
        # link はこのコンポーネント宛てのメッセージをホストに送るための関数です
        self.link: Link = link if link is not None else self.handle_message

    def props_changed(self, props: Any) -> bool:
        self.props = props
        return True

    def handle_message(self, msg: Any) -> bool:
        return False

    def render(self) -> Node:
        raise NotImplementedError
