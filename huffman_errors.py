class HuffmanError(Exception): # base class for every error raised by the coder
    pass


class EmptyAlphabetError(HuffmanError, ValueError): # tree build requested with zero symbols
    pass


class EmptyQueueError(HuffmanError, IndexError): # extract from an empty heap, internal invariant violation
    pass


class AllocationError(HuffmanError, MemoryError): # heap capacity exhausted or storage could not be reserved
    pass


class ResourceOpenError(HuffmanError, OSError): # probability/input/output file cannot be opened
    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"cannot open '{self.path}': {reason}")

    def __str__(self):
        return f"cannot open '{self.path}': {self.reason}"


class MalformedProbabilityData(HuffmanError, ValueError): # probability vector is short or unparsable
    pass


class SymbolNotInAlphabet(HuffmanError, KeyError): # symbol has no leaf in the tree
    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(symbol)

    def __str__(self):
        return f"symbol {self.symbol!r} is not in the alphabet"


class EmptySampleError(HuffmanError, ValueError): # probability estimation on an empty sample
    pass
