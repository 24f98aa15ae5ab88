"""Erreurs métier.

Toutes les erreurs remontées par les routes sont converties en
``{"success": false, "message": ...}`` avec un statut HTTP 200 (voir
``app.main``). Les sous-classes ne servent qu'à classer l'erreur dans les logs
et les tests.
"""


class AppError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(AppError):
    """Champ obligatoire manquant ou invalide"""


class AuthorizationFailure(AppError):
    """Token absent, invalide ou expiré"""


class ConflictError(AppError):
    """Ressource déjà existante (email)"""


class NotFoundError(AppError):
    pass


class DomainRuleViolation(AppError):
    """OTP invalide/expiré, compte déjà vérifié..."""


class NotificationError(AppError):
    pass
