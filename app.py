from config import app, HOST, PORT
import helpers
from weather.routes import *

if __name__ == "__main__":
    app.run(host=HOST, port=PORT, debug=False)
