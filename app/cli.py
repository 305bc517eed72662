"""CLI gleba : migrations, administrateur et taches planifiees"""

import sys
import argparse
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings


def _alembic_config(url: Optional[str] = None):
    from alembic.config import Config as AlembicConfig

    from app.migrations import MIGRATIONS_DIR

    alembic_cfg = AlembicConfig()
    alembic_cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    alembic_cfg.set_main_option("sqlalchemy.url", url or settings.database_url)
    return alembic_cfg


def _session() -> Session:
    from app.database import SessionLocal

    return SessionLocal()


def cmd_db(args: argparse.Namespace) -> int:
    from alembic import command as alembic_command

    alembic_cfg = _alembic_config(args.url)

    if args.action == "upgrade":
        alembic_command.upgrade(alembic_cfg, args.revision or "head")
    elif args.action == "downgrade":
        if not args.revision:
            print("ERREUR: --revision est requis pour downgrade", file=sys.stderr)
            return 1
        alembic_command.downgrade(alembic_cfg, args.revision)
    elif args.action == "current":
        alembic_command.current(alembic_cfg)
    elif args.action == "history":
        alembic_command.history(alembic_cfg)
    return 0


def cmd_create_admin(args: argparse.Namespace) -> int:
    from app.services.user import ensure_admin

    db = _session()
    try:
        user, created = ensure_admin(db, email=args.email, password=args.password)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    if created:
        print(f"Administrateur {user.email} créé (id={user.id})")
    else:
        print(f"L'utilisateur {user.email} existe déjà (id={user.id})")
    return 0


def cmd_irrigations(args: argparse.Namespace) -> int:
    from app.models.user import User
    from app.services.irrigation import generer_irrigations

    db = _session()
    try:
        user_id = None
        if args.user:
            # email ou identifiant numerique
            stmt = (
                select(User).where(User.id == int(args.user))
                if args.user.isdigit()
                else select(User).where(User.email == args.user)
            )
            user = db.execute(stmt).scalar_one_or_none()
            if user is None:
                print(f"ERREUR: utilisateur '{args.user}' introuvable", file=sys.stderr)
                return 1
            user_id = user.id

        resultat = generer_irrigations(
            db, annee=args.year, force=args.force, user_id=user_id
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print(
        f"{resultat['cultures_traitees']} culture(s) traitée(s), "
        f"{resultat['cultures_ignorees']} ignorée(s), "
        f"{resultat['irrigations_creees']} irrigation(s) créée(s)"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gleba",
        description="Administration de la base gleba",
    )
    sub = parser.add_subparsers(dest="command")

    # Migrations
    db = sub.add_parser("db", help="Gestion du schema (Alembic)")
    db.add_argument("action", choices=["upgrade", "downgrade", "current", "history"])
    db.add_argument("--revision", help="Revision cible (defaut: head pour upgrade)")
    db.add_argument("--url", help="URL de la base (defaut: variables GLEBA_*)")
    db.set_defaults(func=cmd_db)

    # Administrateur
    admin = sub.add_parser("create-admin", help="Créer un administrateur")
    admin.add_argument("--email", default=settings.GLEBA_ADMIN_EMAIL)
    admin.add_argument("--password", default=settings.GLEBA_ADMIN_PASSWORD)
    admin.set_defaults(func=cmd_create_admin)

    # Irrigations
    irrigations = sub.add_parser("irrigations", help="Calendrier d'arrosage")
    irr_sub = irrigations.add_subparsers(dest="irrigations_command")
    generate = irr_sub.add_parser("generate", help="Générer les irrigations d'une année")
    generate.add_argument("--year", type=int, required=True, help="Année des cultures")
    generate.add_argument("--user", help="Email ou id de l'utilisateur (tous sinon)")
    generate.add_argument(
        "--force", action="store_true", help="Régénérer les calendriers existants"
    )
    generate.set_defaults(func=cmd_irrigations)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
