"""
Block-chunked object pool that owns the network's elements.
"""

import logging
import typing

logger = logging.getLogger(__name__)

__all__ = ["MemPool", "Handle"]

Handle = int
"""Index of a slot in a `MemPool`"""

T = typing.TypeVar("T")

_EMPTY = object()


class MemPool:
    """
    Arena that hands out slots in fixed-size blocks.

    Objects are constructed by their owner into a slot reserved with `alloc`
    and then `place`-d. There is no per-object release: every object lives
    until the whole pool is `reset`.
    """

    def __init__(self, block_size: int = 256) -> None:
        """
        Initialize the pool.

        :param block_size: Number of slots in each block
        """
        if block_size <= 0:
            raise ValueError("Block size must be positive")
        self.block_size = block_size
        self._blocks: typing.List[typing.List[typing.Any]] = []
        self._next = 0
        self._types: typing.Dict[Handle, type] = {}

    @property
    def allocation_count(self) -> int:
        """Number of slots handed out since the last reset."""
        return self._next

    @property
    def block_count(self) -> int:
        """Number of blocks currently held."""
        return len(self._blocks)

    def alloc(self, cls: typing.Type[T]) -> Handle:
        """
        Reserve a slot for an object of type `cls`.

        :param cls: Type of the object that will be placed in the slot
        :return: Handle of the reserved slot
        """
        handle = self._next
        block = handle // self.block_size
        if block == len(self._blocks):
            self._blocks.append([_EMPTY] * self.block_size)
            logger.debug(f"Pool grew to {len(self._blocks)} block(s)")
        self._next += 1
        self._types[handle] = cls
        return handle

    def place(self, handle: Handle, obj: T) -> T:
        """
        Store `obj` in the slot reserved under `handle`.

        :param handle: Handle returned by `alloc`
        :param obj: Object to store, must be an instance of the reserved type
        :return: The stored object
        """
        cls = self._types.get(handle)
        if cls is None:
            raise KeyError(f"Handle {handle} was not allocated from this pool")
        if not isinstance(obj, cls):
            raise TypeError(
                f"Slot {handle} was reserved for {cls.__name__}, "
                f"got {type(obj).__name__}"
            )
        block, offset = divmod(handle, self.block_size)
        self._blocks[block][offset] = obj
        return obj

    def get(self, handle: Handle) -> typing.Any:
        """
        Return the object stored under `handle`.

        :raises KeyError: if the slot was never allocated or is still empty
        """
        if not 0 <= handle < self._next:
            raise KeyError(f"Handle {handle} was not allocated from this pool")
        block, offset = divmod(handle, self.block_size)
        obj = self._blocks[block][offset]
        if obj is _EMPTY:
            raise KeyError(f"Slot {handle} is empty")
        return obj

    def reset(self) -> None:
        """Drop every block and the objects they hold."""
        logger.debug(
            f"Releasing {self._next} object(s) held in {len(self._blocks)} block(s)"
        )
        self._blocks.clear()
        self._types.clear()
        self._next = 0

    def __len__(self) -> int:
        return self._next

    def __iter__(self) -> typing.Iterator[typing.Any]:
        for handle in range(self._next):
            block, offset = divmod(handle, self.block_size)
            obj = self._blocks[block][offset]
            if obj is not _EMPTY:
                yield obj

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(block_size={self.block_size}, "
            f"allocated={self._next}, blocks={len(self._blocks)})"
        )
