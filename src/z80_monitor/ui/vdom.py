# z80_monitor/ui/vdom.py
"""
描画ツリー。

ビューモデルはウィジェットを直接操作せず、このモジュールの Node からなる
純粋なデータ構造を返します。ホスト（Qtウィンドウ）はそれを解釈して表示します。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple


# @intent:data_structure 描画ツリーの1要素。タグ、属性、子要素、テキストを持ちます。
@dataclass(frozen=True)
class Node:
    tag: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: Tuple["Node", ...] = ()
    text: Optional[str] = None

    @property
    def id(self) -> Optional[str]:
        return self.attrs.get("id")

    def attr(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    # @intent:responsibility 自身を含む全ての子孫を深さ優先で列挙します。
    def walk(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: str) -> Optional["Node"]:
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def find_all(self, tag: str) -> Tuple["Node", ...]:
        return tuple(node for node in self.walk() if node.tag == tag)

    def text_content(self) -> str:
        return "".join(node.text for node in self.walk() if node.text)


# @intent:utility_function Node を簡潔に組み立てます。予約語と衝突する属性名は末尾に _ を付けて渡します。
def h(tag: str, *children: Optional[Node], text: Optional[str] = None, **attrs: Any) -> Node:
    clean = {name.rstrip("_"): value for name, value in attrs.items() if value is not None}
    return Node(tag, clean, tuple(child for child in children if child is not None), text)


def fragment(*children: Optional[Node]) -> Node:
    return h("fragment", *children)


EMPTY = fragment()
