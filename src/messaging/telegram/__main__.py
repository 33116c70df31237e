"""Run the reminder acknowledgment bot: python -m src.messaging.telegram"""

from src.messaging.telegram.polling import main

if __name__ == "__main__":
    main()
