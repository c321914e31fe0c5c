from org_agenda.cli import app

if __name__ == "__main__":
    app()
