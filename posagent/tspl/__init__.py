"""TSPL2 command building and CP1252 transcoding for thermal label printers."""