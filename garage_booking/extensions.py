"""
Flask extension instances, bound to the app in ``create_app``.
"""
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_mail import Mail

bcrypt = Bcrypt()
jwt = JWTManager()
mail = Mail()
cors = CORS()
