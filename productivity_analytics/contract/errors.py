"""Contract revert reasons"""


class ContractError(Exception):
    """A rejected contract call; nothing was written"""


class SignerRequired(ContractError):
    pass


class NotManager(ContractError):
    pass


class UnknownMetric(ContractError):
    pass


class UnknownRequest(ContractError):
    pass


class UnknownCategory(ContractError):
    pass


class AlreadyRevealed(ContractError):
    pass


class InvalidSignature(ContractError):
    pass
