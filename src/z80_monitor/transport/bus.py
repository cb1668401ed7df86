# z80_monitor/transport/bus.py
"""
Transport Layer (共通バス)

このモジュールは、メモリアドレス空間とI/Oポート空間を抽象化し、
読み書きアクセスを適切なデバイスに委譲する責務を負います。
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple


# @intent:responsibility バスの抽象デバイスインターフェースを定義します。
class Device(ABC):
    """
    バスに接続されるデバイスの抽象基底クラス。
    アドレスはデバイス内でのオフセットとして扱われます。
    """
    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass


# @intent:responsibility 基本的なRAMデバイスの機能を提供します。
class RAM(Device):
    """
    プログラムとデータを保持するRAMデバイス。
    """
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def read(self, address: int) -> int:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:responsibility 連続したバイト列を一括で書き込みます（プログラムのロード用）。
    def load(self, address: int, data: bytes) -> None:
        end = address + len(data)
        if address < 0 or end > self._size:
            raise IndexError(
                f"Image of {len(data)} bytes at {address:#06x} does not fit in RAM of size {self._size}."
            )
        self._memory[address:end] = data

    # @intent:responsibility メモリ内容の不変コピーを返します。UIのメモリダンプ用。
    def dump(self) -> bytes:
        return bytes(self._memory)

    def get_size(self) -> int:
        return self._size


# @intent:responsibility I/Oポートへの書き込みを蓄積する出力キャプチャデバイス。
class OutputCapture(Device):
    """
    ポートに接続され、CPUがOUT命令で書き込んだバイトを追記していくシンク。
    接続時点からの全ての書き込みを result() で取得できます。
    """
    def __init__(self):
        self._buffer = bytearray()

    # @intent:rationale 出力専用ポートのため、読み込みは常に0を返します。
    def read(self, address: int) -> int:
        return 0x00

    def write(self, address: int, data: int) -> None:
        self._buffer.append(data & 0xFF)

    def result(self) -> bytes:
        return bytes(self._buffer)


# @intent:responsibility メモリアドレス空間とI/O空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
class Bus:
    """
    メモリアドレス空間とI/Oポート空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
    """
    def __init__(self):
        # (start_address, end_address, device) のタプルリスト
        self._memory_map: List[Tuple[int, int, Device]] = []
        # ポート番号 -> デバイス
        self._io_map: Dict[int, Device] = {}

    # @intent:responsibility 指定されたアドレス範囲にデバイスを登録します。
    # @intent:rationale アドレス範囲の重複チェックは行いません。呼び出し元が責任を持ちます。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address):
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        if isinstance(device, RAM):
            expected_size = end_address - start_address + 1
            if device.get_size() != expected_size:
                raise ValueError(
                    f"Registered {type(device).__name__} device size ({device.get_size()} bytes) does not match "
                    f"the specified address range size ({expected_size} bytes)."
                )

        self._memory_map.append((start_address, end_address, device))

    # @intent:responsibility 指定されたI/Oポートにデバイスを接続します。既存の接続は置き換えられます。
    def register_io_device(self, port: int, device: Device) -> None:
        if not 0 <= port <= 0xFF:
            raise ValueError(f"Port {port} is not an 8-bit port number.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")
        self._io_map[port] = device

    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    def read(self, address: int) -> int:
        device, offset = self._find_device(address)
        return device.read(offset)

    # @intent:responsibility 副作用なしで読み出します。デコーダやUIなどのインスペクタ用。
    def peek(self, address: int) -> int:
        device, offset = self._find_device(address)
        return device.read(offset)

    def write(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)
        device.write(offset, data)

    # @intent:responsibility 指定されたI/Oポートから読み出します。未接続のポートは0を返します。
    def read_io(self, port: int) -> int:
        device = self._io_map.get(port & 0xFF)
        if device is None:
            return 0x00
        return device.read(port & 0xFF)

    # @intent:responsibility 指定されたI/Oポートに書き込みます。未接続のポートへの書き込みは捨てられます。
    def write_io(self, port: int, data: int) -> None:
        device = self._io_map.get(port & 0xFF)
        if device is not None:
            device.write(port & 0xFF, data)
