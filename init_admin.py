#!/usr/bin/env python3
"""
Script d'initialisation pour créer le premier admin

Usage: python init_admin.py [mot_de_passe]
(sinon ADMIN_PASSWORD dans l'environnement)
"""
import os
import sys

from app.config import config
from app.crud.admin import create_admin
from app.errors import RepositoryError


def init_admin(password: str) -> bool:
    """Initialise le compte admin ADMIN_EMAIL"""
    email = config.ADMIN_EMAIL
    try:
        created = create_admin(email, password)
    except RepositoryError as e:
        print(f"❌ Erreur lors de la création de l'admin: {e}")
        return False

    if not created:
        print("✅ Un admin existe déjà dans la base de données.")
        print(f"   Email: {email}")
        return True

    print("🎉 Admin créé avec succès !")
    print(f"   Email: {email}")
    print("   Alias de connexion: admin, gallery, midnight, sj")
    print("\n🔗 Vous pouvez maintenant vous connecter sur:")
    print(f"   {config.FRONTEND_URL.split(',')[0].strip()}/admin/login")
    return True


if __name__ == "__main__":
    password = sys.argv[1] if len(sys.argv) > 1 else os.getenv("ADMIN_PASSWORD")
    if not password:
        print("❌ Mot de passe manquant (argument ou ADMIN_PASSWORD)")
        sys.exit(1)
    sys.exit(0 if init_admin(password) else 1)
