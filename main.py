"""
SunSar Daily Word Puzzle Server - Main Entry Point

This is the main entry point for the puzzle server.
It initializes all services and starts the Flask-SocketIO application.
"""

import os
import threading
import time

from sunsar import create_app
from sunsar.config import config, validate_word_list_integrity
from sunsar.services.game_service import get_game_service, initialize_game_service
from sunsar.utils.game_logger import game_logger


def session_cleanup_worker(interval):
    """
    Background worker that periodically forgets puzzle sessions from earlier days.
    Saved games and stats are untouched; only the in-memory session registry shrinks.
    """
    while True:
        try:
            game_service = get_game_service()
            if game_service:
                removed = game_service.prune_sessions()
                if removed > 0:
                    game_logger.logger.info(f"Session cleanup: Removed {removed} stale sessions")
        except Exception as e:
            game_logger.logger.error(f"Error in session cleanup worker: {e}")

        time.sleep(interval)


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('FLASK_ENV', 'default')]
    try:
        print("Initializing services...")

        validate_word_list_integrity()
        print("✓ Word list validated")

        game_service = initialize_game_service(config_class)
        print(f"✓ Game service initialized ({config_class.STORAGE_BACKEND} storage)")
        if config_class.GEMINI_API_KEY:
            print(f"✓ Generative word provider enabled ({config_class.LLM_MODEL})")
        else:
            print("✗ No LLM API key configured, using the static word list")

        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        interval = config_class.SESSION_CLEANUP_INTERVAL_SECONDS
        cleanup_thread = threading.Thread(target=session_cleanup_worker, args=(interval,), daemon=True)
        cleanup_thread.start()
        print(f"✓ Session cleanup worker started - checking every {interval:g} seconds")

        game_logger.logger.info("SunSar Server Starting")

        print(f"\nStarting SunSar server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Today's puzzle: {game_service.day_keys.current_day_key()}")
        print("=" * 50)

        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("SunSar Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
