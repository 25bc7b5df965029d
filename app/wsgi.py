from app.imatrix import create_app

app = create_app()
