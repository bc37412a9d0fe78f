import sys

from storefront import create_app
from storefront.seed import SeedError, seed_data


def main():
    # seed_data() est appelé explicitement ci-dessous, pas au démarrage de l'app
    app = create_app({"SEED_ON_STARTUP": False})
    with app.app_context():
        try:
            seed_data()
        except SeedError as e:
            print(f"Seeding interrompu à l'étape {e.task}: {e.__cause__}")
            sys.exit(1)
    print("Données de démonstration en place.")


if __name__ == "__main__":
    main()
