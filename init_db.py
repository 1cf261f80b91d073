#!/usr/bin/env python3
"""
Create the database tables and, optionally, a demo practice account.
Run with: python init_db.py [--demo]
"""
import sys

from odonto import create_app
from odonto.extensions import db
from odonto.models import Dentista, Profissional

DEMO_ACCOUNT = {
    'nome': 'Dra. Demonstração',
    'cro': 'CRO-SP 00000',
    'email': 'demo@dentalultra.com',
    'senha': 'demo123',
    'clinica': 'Clínica Demo',
}


def create_demo_account():
    """Demo account with one practitioner on its agenda"""
    existing = Dentista.query.filter_by(email=DEMO_ACCOUNT['email']).first()
    if existing:
        print(f"  - Account '{DEMO_ACCOUNT['email']}' already exists (skipping)")
        return

    dentista = Dentista(
        nome=DEMO_ACCOUNT['nome'],
        cro=DEMO_ACCOUNT['cro'],
        email=DEMO_ACCOUNT['email'],
        clinica=DEMO_ACCOUNT['clinica'],
        ativo=True
    )
    dentista.set_senha(DEMO_ACCOUNT['senha'])
    db.session.add(dentista)
    db.session.flush()

    db.session.add(Profissional(dentista_id=dentista.id, nome=DEMO_ACCOUNT['nome'], cro=DEMO_ACCOUNT['cro']))
    db.session.commit()
    print(f"  ✓ Created: {DEMO_ACCOUNT['email']} - Password: {DEMO_ACCOUNT['senha']}")


def init_db(with_demo=False):
    app = create_app()

    with app.app_context():
        print("=" * 60)
        print("Initializing database")
        print("=" * 60)

        db.create_all()
        print("  ✓ Tables created")

        if with_demo:
            create_demo_account()
            print("\n⚠️  IMPORTANT: Change the demo password after first login!")


if __name__ == '__main__':
    init_db(with_demo='--demo' in sys.argv)
