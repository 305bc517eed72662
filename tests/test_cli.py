"""
Tests du parseur de la CLI
"""

import pytest

from app.cli import build_parser, main


def test_db_upgrade_par_defaut():
    args = build_parser().parse_args(["db", "upgrade"])
    assert args.action == "upgrade"
    assert args.revision is None


def test_db_action_invalide():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["db", "reset"])


def test_create_admin_valeurs_par_defaut():
    args = build_parser().parse_args(["create-admin"])
    assert args.email == "admin@gleba.local"
    assert args.password


def test_irrigations_generate():
    args = build_parser().parse_args(["irrigations", "generate", "--year", "2025", "--force"])
    assert args.year == 2025
    assert args.force is True
    assert args.user is None


def test_irrigations_annee_requise():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["irrigations", "generate"])


def test_sans_commande():
    assert main([]) == 1
