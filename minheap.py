import heapq

from huffman_errors import AllocationError, EmptyQueueError


class MinHeap: # min-heap of tree nodes keyed by weight, ties broken by an order number
    """
    Entries are (weight, order, node) tuples kept in heap order by heapq
    Nodes themselves are never compared, so any object can be stored
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._entries = []
        self._next_order = 0

    @classmethod
    def build_from_unordered(cls, nodes, weights=None) -> "MinHeap":
        """
        Bulk load in O(n) with a bottom-up heapify
        weights defaults to each node's .weight; order is the position in nodes
        """
        nodes = list(nodes)
        if weights is None:
            weights = [node.weight for node in nodes]
        else:
            weights = list(weights)
            if len(weights) != len(nodes):
                raise ValueError("nodes and weights must have the same length")

        heap = cls(len(nodes))
        heap._entries = [(w, i, node) for i, (w, node) in enumerate(zip(weights, nodes))]
        heapq.heapify(heap._entries)
        heap._next_order = len(nodes)
        return heap

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def size_is_one(self) -> bool:
        return len(self._entries) == 1

    def insert(self, node, weight=None, order=None) -> None:
        if len(self._entries) >= self.capacity:
            raise AllocationError(f"heap capacity of {self.capacity} entries exhausted")
        if weight is None:
            weight = node.weight
        if order is None:
            order = self._next_order
        self._next_order = max(self._next_order, order + 1)
        heapq.heappush(self._entries, (weight, order, node)) # sift up

    def extract_min(self):
        if not self._entries:
            raise EmptyQueueError("extract_min called on an empty heap")
        return heapq.heappop(self._entries)[2] # last entry moves to the root, then sift down

    def peek_min(self):
        if not self._entries:
            raise EmptyQueueError("peek_min called on an empty heap")
        return self._entries[0][2]
