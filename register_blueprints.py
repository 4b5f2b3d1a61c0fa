def register_blueprints(app):
    from modules.vehicles.makes.routes import bp as makes_bp
    from modules.vehicles.vehicle_models.routes import bp as vehicle_models_bp

    app.register_blueprint(makes_bp)
    app.register_blueprint(vehicle_models_bp)
