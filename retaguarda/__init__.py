"""Retaguarda: caixa, auditoria e financeiro para varejo/restaurante."""

__version__ = "2.0.0"
