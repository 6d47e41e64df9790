"""Built-in command plugins, discovered by CommandRegistry.load_plugins"""
