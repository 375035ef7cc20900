# module hearty_hounds.app
from hearty_hounds.app_setup.factory import create_app

app = create_app()
