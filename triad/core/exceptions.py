"""
Triad Exception Hierarchy

All exceptions inherit from TriadError for easy catching.
"""


class TriadError(Exception):
    """Base exception for all triad errors"""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ValidationError(TriadError):
    """Raised when input validation fails"""
    pass


class InvalidAmountError(ValidationError):
    """Raised when an amount is zero where value is required, or negative"""
    pass


class AuthorizationError(TriadError):
    """Raised when a capability check fails"""
    pass


class AccessDeniedError(AuthorizationError):
    """Raised when the caller is not the administrator or the oracle"""
    pass


class LedgerError(TriadError):
    """Raised when ledger operations fail"""
    pass


class InsufficientClaimableError(LedgerError):
    """Raised when a claim exceeds the caller's claimable balance"""
    
    def __init__(self, requested: int, claimable: int = 0):
        super().__init__(
            "Insufficient claimable balance",
            {"requested": requested, "claimable": claimable},
        )
        self.requested = requested


class InsufficientFundsError(LedgerError):
    """Raised when a debit exceeds the available balance"""
    pass


class SettlementError(TriadError):
    """Raised when submission or resolution fails"""
    pass


class InsufficientOracleFeeError(SettlementError):
    """Raised when the engine cannot pay the randomness fee"""
    pass


class TransferFailedError(SettlementError):
    """Raised when a value transfer to a participant is rejected"""
    pass


class UnknownMatchError(SettlementError):
    """Raised when a match or randomness request id is not known"""
    pass


class MatchAlreadyResolvedError(SettlementError):
    """Raised when a match receives a second resolution"""
    pass


class DuplicateMatchError(SettlementError):
    """Raised when a match id is allocated twice"""
    pass


class JournalError(TriadError):
    """Raised when journal reads or writes fail"""
    pass


class ConfigError(TriadError):
    """Raised when runtime configuration is missing or malformed"""
    pass
