"""
Folha de Ponto - Secretaria de Educação
Programa para gerar folhas de ponto mensais (individual e em lote)
com observações automáticas e exportação em PDF.
"""
import logging

from folha.config import load_config
from ui.main_window import MainWindow


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )
    app = MainWindow(load_config())
    app.mainloop()


if __name__ == "__main__":
    main()
